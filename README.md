# lsindex

A learned secondary index for unsorted data. The index keeps a compact,
bit-packed permutation vector that maps sorted key positions back to offsets
in your original (unsorted) sequence, plus a CDF model that predicts where a
key sits in that order. A lookup probes only the window that the model's
maximum error allows, either by binary search or by linear search with
optional fingerprint bits that skip non-matching entries cheaply.

Two baseline indexes are included for comparison:

- `BTree` (`lsindex.btree`): keeps `(key, offset)` pairs in key order, filled
  by insertion or by bulk load
- `RobinHash` (`lsindex.hash_index`): a hash map for equality lookups only

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
import random

from lsindex.lsi import LearnedSecondaryIndex

keys = [i + 20000 for i in range(100_000)]
random.Random(42).shuffle(keys)

index = LearnedSecondaryIndex(data=keys)

# Equality lookup: a position in key order, or None when the key is absent.
pos = index.lookup(keys, keys[123])
assert index.offset(pos) == 123

# Lower-bound lookup: first entry not less than the key, or None if all are smaller.
pos = index.lookup(keys, 50_000, lowerbound=True)
if pos is not None:
    assert keys[index.offset(pos)] >= 50_000
```

The data passed to `lookup` must be the same sequence the index was fitted
on. Iterating over an index yields offsets into that data in key order:

```python
sorted_keys = [keys[offset] for offset in index]
```

Fingerprint bits (up to 63) speed up equality lookups by ruling out most
non-matching candidates before the base data is touched; linear search can
also be forced without them:

```python
index = LearnedSecondaryIndex(fingerprint_size=8, data=keys)
index = LearnedSecondaryIndex(force_linear_search=True, data=keys)
```

By default the index uses a piecewise linear CDF model. Any other model can be
passed as `model=`; it needs `train(sorted_keys)`, must be callable with a key
to predict its position, and must offer `byte_size()` and `name()`.

The counters `base_data_accesses` and `false_positive_accesses` record how
often lookups read the base data. Every index reports its memory footprint
through `model_byte_size()`, `perm_vector_byte_size()` and `byte_size()`, and
describes itself with `name()`.

### Baselines

```python
from lsindex.btree import BTree
from lsindex.hash_index import RobinHash

tree = BTree(keys)                  # or BTree(keys, bulk_load=True)
pos = tree.lookup(keys, keys[7])    # always a lower bound; None past the end
assert tree.offset(pos) == 7

table = RobinHash(keys)
assert table.lookup(keys, keys[7]) == 7   # returns the offset directly
```

`RobinHash.lookup` raises `ValueError` when asked for a lower bound.

### Building blocks

- `lsindex.bit_packing`: fixed-width bit packing (`store_bit_packed`,
  `BitPackedReader`, `max_bit_width`, `put_slop_bytes`)
- `lsindex.byte_coding`: a growable `ByteBuffer` and a `ByteReader` for
  little-endian primitives, varints and length-prefixed strings
- `lsindex.permvector`: the bit-packed `PermVector` of `PermValue` entries
- `lsindex.fingerprinter`: `Fingerprinter` and `murmur_finalizer`
- `lsindex.support`: `lower_bound` and bit helpers (`ffs`, `ctz`, `clz`,
  `bitreverse`)
- `lsindex.art_node`: adaptive radix tree node types (`Leaf`, `Node4`,
  `Node16`, `Node48`, `Node256`) that grow and shrink as children are
  inserted and erased

### Benchmark data

`lsindex.datasets` generates synthetic datasets (sequential, gapped, uniform,
normal) and loads binary key files in the 8-byte-header format through
`DatasetCache(data_dir="data")`; a missing file yields an empty list.
`lsindex.probing_set.generate_probing_set` draws lookup keys from a dataset
with a uniform or exponential distribution.

## Limitations

`lsindex.art_node` provides only the nodes of an adaptive radix tree. The
package has no complete radix tree index built from them: there is no
insertion, lookup or iteration over a whole tree.

The package has no benchmark runner or command-line tool; the dataset and
probing helpers are meant to be driven from your own code.