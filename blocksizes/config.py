# global variables
PTR_SIZE = 8 # bytes/pointer
BITS_PER_BYTE = 8
MIN_CAPACITY = 2 # bytes, smallest block
MAX_CAPACITY = 1 << (PTR_SIZE * BITS_PER_BYTE) # bytes, whole address space

# serialized table keys
PTR_SIZE_KEY = 'ptr_size'
MIN_SHIFT_KEY = 'min_shift'
BLOCK_SHIFTS_KEY = 'block_shifts'
