import struct
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .errors import UcdBuildError

# Hash-and-displace perfect hashing. Keys are hashed into buckets, and each bucket gets a pair of
# displacements (d1, d2) chosen so that every key in it lands in a free slot:
#
#     slot = (d2 + f1 * d1 + f2) mod slot_count
#
# Slots hold the index of the key they were built from, so the caller can keep its entries in any order
# and must compare the stored key against the query.

MASK32 = 0xFFFF_FFFF
MASK64 = 0xFFFF_FFFF_FFFF_FFFF

FNV_OFFSET = 0xCBF2_9CE4_8422_2325
FNV_PRIME = 0x0000_0100_0000_01B3

# Average number of keys per bucket.
LAMBDA = 5
MAX_SEEDS = 64

INDEX_HEADER_FORMAT = "<III"
DISPLACEMENT_FORMAT = "<II"
SLOT_FORMAT = "<I"

def _mix(x: int) -> int:
	x = ((x ^ (x >> 30)) * 0xBF58_476D_1CE4_E5B9) & MASK64
	x = ((x ^ (x >> 27)) * 0x94D0_49BB_1331_11EB) & MASK64
	return x ^ (x >> 31)

# Returns (g, f1, f2): the bucket selector and the two displacement factors.
def hash_key(key: bytes, seed: int) -> Tuple[int, int, int]:
	h = FNV_OFFSET ^ seed
	for byte in key:
		h = ((h ^ byte) * FNV_PRIME) & MASK64

	h = _mix(h)
	return h >> 32, h & MASK32, _mix(h) & MASK32

def displace(f1: int, f2: int, d1: int, d2: int) -> int:
	return (d2 + f1 * d1 + f2) & MASK32

def codepoint_key(codepoint: int) -> bytes:
	return struct.pack("<I", codepoint)

def text_key(text: str) -> bytes:
	return text.encode("ascii")

@dataclass
class HashIndex:
	seed: int
	displacements: list[Tuple[int, int]]
	# slot -> key index
	slots: list[int]

	def to_bytes(self) -> bytes:
		out = bytearray(struct.pack(INDEX_HEADER_FORMAT, self.seed, len(self.displacements), len(self.slots)))
		for d1, d2 in self.displacements:
			out.extend(struct.pack(DISPLACEMENT_FORMAT, d1, d2))
		for key_index in self.slots:
			out.extend(struct.pack(SLOT_FORMAT, key_index))
		return bytes(out)

def build_hash_index(keys: Sequence[bytes]) -> HashIndex:
	if len(set(keys)) != len(keys):
		raise UcdBuildError("duplicate keys given to the perfect hash builder")

	# Seeds are tried in a fixed order so that identical keys always produce an identical index.
	for seed in range(MAX_SEEDS):
		index = _try_build(keys, seed)
		if index is not None:
			return index

	raise UcdBuildError(f"no perfect hash found for {len(keys)} keys after {MAX_SEEDS} seeds")

def _try_build(keys: Sequence[bytes], seed: int) -> Optional[HashIndex]:
	key_count = len(keys)
	if key_count == 0:
		return HashIndex(seed, [], [])

	hashes = [hash_key(key, seed) for key in keys]

	bucket_count = (key_count + LAMBDA - 1) // LAMBDA
	buckets: list[list[int]] = [[] for _ in range(bucket_count)]
	for key_index, (g, _, _) in enumerate(hashes):
		buckets[g % bucket_count].append(key_index)

	# Largest buckets first, while the table is still empty.
	order = sorted(range(bucket_count), key = lambda bucket: len(buckets[bucket]), reverse = True)

	displacements = [(0, 0)] * bucket_count
	slots: list[Optional[int]] = [None] * key_count

	# try_map[slot] == generation marks slots claimed by the attempt in progress.
	try_map = [0] * key_count
	generation = 0

	for bucket in order:
		members = buckets[bucket]
		if not members:
			continue

		placed = False
		for d1 in range(key_count):
			for d2 in range(key_count):
				generation += 1
				claimed = []

				for key_index in members:
					_, f1, f2 = hashes[key_index]
					slot = displace(f1, f2, d1, d2) % key_count
					if slots[slot] is not None or try_map[slot] == generation:
						break
					try_map[slot] = generation
					claimed.append((slot, key_index))
				else:
					for slot, key_index in claimed:
						slots[slot] = key_index
					displacements[bucket] = (d1, d2)
					placed = True
					break

			if placed:
				break

		if not placed:
			return None

	return HashIndex(seed, displacements, slots)

# Read side of a `HashIndex` serialized at `offset` within `data`.
class HashIndexView:
	def __init__(self, data: bytes, offset: int) -> None:
		self.data = data
		self.seed, self.bucket_count, self.slot_count = struct.unpack_from(INDEX_HEADER_FORMAT, data, offset)
		self.displacements = offset + struct.calcsize(INDEX_HEADER_FORMAT)
		self.slots = self.displacements + self.bucket_count * struct.calcsize(DISPLACEMENT_FORMAT)

	def __len__(self) -> int:
		return self.slot_count

	# Returns the index of the only key that can be `key`, or None if the index is empty.
	def find(self, key: bytes) -> Optional[int]:
		if self.slot_count == 0:
			return None

		g, f1, f2 = hash_key(key, self.seed)
		d1, d2 = struct.unpack_from(DISPLACEMENT_FORMAT, self.data, self.displacements + 8 * (g % self.bucket_count))
		slot = displace(f1, f2, d1, d2) % self.slot_count

		key_index, = struct.unpack_from(SLOT_FORMAT, self.data, self.slots + 4 * slot)
		return key_index
