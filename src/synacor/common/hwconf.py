MAX_LITERAL     = 0x7FFF
MODULUS         = MAX_LITERAL + 1
WORD_MASK       = 0x7FFF            # 15-bit value space
WORD_SIZE       = 2                 # bytes per word in a binary image

MEMORY_SIZE     = 0x8000            # words

REGISTERS       = 8
REGISTER_BASE   = MAX_LITERAL + 1   # raw word of r0
REGISTER_LIMIT  = REGISTER_BASE + REGISTERS  # first invalid raw word
