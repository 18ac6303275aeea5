# ottercache

Thread-safe building blocks for an in-memory cache, written in plain Python
with no third-party dependencies.

## What is inside

- `ottercache.hashmap.ConcurrentMap`: a bucketed hash map of nodes (any
  object with a `key` attribute). `compute(key, fn)` inserts, replaces or
  deletes a node under the bucket's lock; `get`, `range`, `clear`, iteration
  and `len()` are also offered. The table grows as it fills and shrinks back
  to its initial length as it empties.
- `ottercache.deque.LinkedDeque`: an intrusive doubly linked list. Nodes carry
  their own `prev`/`next` links, or `prev_exp`/`next_exp` when built with
  `is_exp=True`.
- `ottercache.timerwheel.TimerWheel`: a hierarchical timer wheel. Nodes are
  scheduled by their `expires_at` (nanoseconds) and linked through
  `prev_exp`/`next_exp`; `delete_expired` hands due nodes to a callback and
  reschedules the rest.
- `ottercache.lossy.Ring` and `ottercache.lossy.StripedBuffer`: non-blocking
  buffers for many producers and one consumer. `add` returns a `Status`
  (`SUCCESS`, `FAILED` or `FULL`) and may fail under contention or when full;
  `drain_to` passes buffered nodes to a consumer.
- `ottercache.mpsc.MPSCQueue`: a bounded FIFO queue. Capacities are rounded up
  to a power of two; `try_push` returns `False` when full and `try_pop` returns
  `None` when empty.
- `ottercache.adder.Adder`: a striped unsigned 64-bit counter.
- `ottercache.singleflight.Group` and `Call`: make sure one caller at a time
  loads a given key while others wait on the shared `Call`.
- `ottercache.loader`: the `Loader` and `BulkLoader` base classes, the function
  adapters `LoaderFunc` and `BulkLoaderFunc`, `NotFoundError` and
  `RefreshResult`.
- `ottercache.refresh`: `RefreshCalculator` and the constructors
  `refresh_creating`, `refresh_writing`, `refresh_creating_func` and
  `refresh_writing_func`. Durations are nanoseconds; the non-`_func`
  constructors also accept `datetime.timedelta`.
- `ottercache.logger`: the `Logger` base class, `DefaultLogger` (writes to the
  standard `logging` logger named `ottercache`) and `NoopLogger`.
- `ottercache.options.Options`: a dataclass of cache settings with
  `validate()`, which raises `ValueError` for contradictory settings, and
  `effective_*` methods that fill in defaults.
- Helpers: `ottercache.xmath` (power-of-two rounding, saturated addition),
  `ottercache.xruntime` (`fastrand`, `parallelism`, seeded `Hasher`) and
  `ottercache.xiter` (`concat`, `merge_func`).

## Installation

```
pip install ottercache
```

## Examples

A concurrent map of nodes:

```python
from dataclasses import dataclass
from ottercache.hashmap import ConcurrentMap

@dataclass
class Node:
    key: str
    value: int

m = ConcurrentMap()
m.compute("a", lambda old: Node("a", 1))
m.compute("a", lambda old: Node("a", old.value + 1))
assert m.get("a").value == 2
m.compute("a", lambda old: None)  # returning None deletes
assert m.get("a") is None and len(m) == 0
```

Expiring nodes with a timer wheel:

```python
from ottercache.timerwheel import TimerWheel

class TimedNode:
    def __init__(self, key, expires_at):
        self.key = key
        self.expires_at = expires_at
        self.prev_exp = None
        self.next_exp = None

wheel = TimerWheel(now_nanos=0)
wheel.add(TimedNode("k1", 1_000_000_000))
expired = []
wheel.delete_expired(2_000_000_000, lambda n, now: expired.append(n.key))
assert expired == ["k1"]
```

One load per key:

```python
from ottercache.singleflight import Group

group = Group()
call, should_load = group.start_call("k", False)
assert should_load
assert group.do_call(call, lambda key: key.upper(), group.delete_call) == "K"
```

A loader built from a plain function:

```python
from ottercache.loader import LoaderFunc

loader = LoaderFunc(lambda key: key + 10)
assert loader.load(5) == 15
assert loader.reload(5, 1) == 15
```

A refresh policy:

```python
from datetime import timedelta
from ottercache.refresh import refresh_writing

calc = refresh_writing(timedelta(minutes=30))
assert calc.refresh_after_create(None) == 1_800_000_000_000
```

Validating options:

```python
from ottercache.options import Options

Options(maximum_size=100).validate()

try:
    Options(maximum_size=100, maximum_weight=1000).validate()
except ValueError as exc:
    print(exc)  # ottercache: both maximum_size and maximum_weight are set
```

A striped counter:

```python
from ottercache.adder import Adder

counter = Adder()
counter.add(42)
assert counter.value() == 42
```

## What this package does not do

It provides the parts, not an assembled cache. There is no cache class with
get/set operations, no eviction policy tying the queues together, no
statistics, and no saving or loading of cache contents to disk. `Options`
holds and checks settings, but nothing in the package builds a cache from
them; `stats_recorder`, `expiry_calculator` and `clock` are stored as given.

## Running the tests

```
pip install -e ".[test]"
pytest
```