# linemark

linemark keeps a project outline as a flat directory of Markdown files.
The name of each file records where it sits in the tree:

```
100_A3F7c9Qx7Lm2_draft_chapter-one.md
100_A3F7c9Qx7Lm2_notes.md
100-200_B8kQ2mNp4Rs1_draft_the-storm.md
```

A filename has four parts joined by underscores:

- a **materialized path**, made of three-digit segments joined by dashes. `100-200` is a child of `100`.
- a **stable ID** (SID) of 8 to 12 base62 characters. It does not change when the node moves.
- a **document type** in lowercase letters, such as `draft`, `notes` or `characters`.
- an optional **slug**, taken from the node's title.

The package depends on `pyyaml` and `filelock`. The `test` extra adds `pytest`.

## Building blocks

```python
from linemark.filename import parse_filename, generate_filename
from linemark.paths import parse_path
from linemark.selector import parse_selector
from linemark.slug import slugify
from linemark.numbering import next_sibling_number, sibling_number_after
from linemark.sid import generate

parsed = parse_filename("001-200_B8kQ2mNp4Rs1_draft_chapter-one.md")
parsed.mp         # "001-200"
parsed.depth      # 2
generate_filename(parsed.mp, parsed.sid, parsed.doc_type, parsed.slug)

path = parse_path("001-200-010")
path.parent()     # MaterializedPath for 001-200
path.child(300)   # MaterializedPath for 001-200-010-300

parse_selector("sid:A3F7c9Qx7Lm2")   # a Selector of kind SelectorKind.SID
parse_selector("001-200")            # a Selector of kind SelectorKind.MP

slugify("Part 2: The Return")        # "part-2-the-return"

next_sibling_number([100, 200])             # 300
sibling_number_after([100, 200, 300], 100)  # 110

generate()   # a new 12-character SID drawn from the OS random source
```

New siblings are numbered in steps of 100. A node inserted between two
siblings gets the coarsest free number: a multiple of 100 if one fits, then
a multiple of 10, then any single number. `NoSlotAvailableError` means there
is no free number at the requested position. `MaxSiblingsReachedError` means
all 999 slots are taken. Compacting the outline restores even spacing.

## Frontmatter

Draft documents carry YAML frontmatter that holds a `title`. The
`linemark.frontmatter` module reads and updates it. `set_title` replaces the
title line only, so comments, other fields and field order stay as they were.

```python
from linemark.frontmatter import get_title, set_title, split

doc = "---\nauthor: Alice\ntitle: Old\n---\nBody"
updated = set_title(doc, "Part 1: New")
get_title(updated)   # "Part 1: New"
split(updated)       # ("author: Alice\ntitle: \"Part 1: New\"\n", "Body")
```

Some titles are written in double quotes with escapes: those that contain
colons, quotes, backslashes or newlines, and those that start with `#`.
Because of this, a title cannot add extra keys to the frontmatter.
`FrontmatterError` is raised in three cases:

- the frontmatter is not closed;
- the YAML is malformed;
- the title is not a string.

## Working with a project

A project is a directory that contains a `.linemark/` directory.

- `linemark.storage.find_project_root` walks up from a directory, the working
  directory by default, until it finds a project.
- `ProjectFiles` lists, reads, writes, renames and deletes the files directly
  under the root.
- `ReservationStore` keeps SID markers under `.linemark/ids`.
- `RandomSIDReserver` produces new SIDs.
- `linemark.lock.lock_at` returns an `AdvisoryLock` backed by a lock file. The
  lock does not wait: if another process holds it, `try_lock` raises
  `AlreadyLockedError`.

`linemark.service.OutlineService` ties these together:

```python
from linemark.lock import DEFAULT_PATH, lock_at
from linemark.model import DeleteMode
from linemark.service import OutlineService
from linemark.storage import (
    ProjectFiles, RandomSIDReserver, ReservationStore, find_project_root,
)

root = find_project_root()
files = ProjectFiles(root)
service = OutlineService(
    files, files, lock_at(root / DEFAULT_PATH), RandomSIDReserver(),
    deleter=files, renamer=files, content_reader=files,
    reservation_store=ReservationStore(root),
)

added = service.add("Chapter One")               # draft and notes under a new node
service.add("Prologue", before=added.mp)         # positioned before a sibling
service.check().findings                         # validation findings
service.list_types(added.mp).types               # ["draft", "notes"]
service.add_type("characters", added.mp)
service.rename(added.mp, "The First Chapter", apply=True)
service.move(added.sid, "200", "", "", apply=False)
service.compact("", apply=False)
service.delete(added.mp, DeleteMode.PROMOTE, apply=False)
service.repair()
```

Read-only operations do not take the lock. These are `load`,
`resolve_selector`, `list_types` and `check`. Every other operation holds the
lock while it runs.

`move`, `compact`, `rename` and `delete` accept `apply=False`, and `add`
accepts it as a keyword. With `apply=False` the result lists the planned
renames, deletions or new filename, and no file is changed. A failed batch of
renames is undone where possible and raises `RenameError`.

`delete` takes one of three modes:

- `DeleteMode.DEFAULT` deletes leaf nodes only.
- `DeleteMode.RECURSIVE` deletes the whole subtree.
- `DeleteMode.PROMOTE` moves the direct children up to the parent's level.

The errors raised by outline operations derive from
`linemark.results.OutlineError`. Examples are `NodeNotFoundError`,
`NodeHasChildrenError` and `CycleDetectedError`.

## What this package does not do

linemark is a library only. It has no command-line program, so you call the
operations from Python. It does not format outlines for display.