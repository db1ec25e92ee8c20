HALT = 0x00  # stop
SET  = 0x01  # b -> R[a]
PUSH = 0x02  # a -> [stack]
POP  = 0x03  # [stack] -> R[a]
EQ   = 0x04  # b == c -> R[a]
GT   = 0x05  # b > c -> R[a]
JMP  = 0x06  # goto a
JT   = 0x07  # if a != 0 goto b
JF   = 0x08  # if a == 0 goto b
ADD  = 0x09  # b + c -> R[a]
MULT = 0x0A  # b * c -> R[a]
MOD  = 0x0B  # b % c -> R[a]
AND  = 0x0C  # b & c -> R[a]
OR   = 0x0D  # b | c -> R[a]
NOT  = 0x0E  # ~b -> R[a]
RMEM = 0x0F  # M[b] -> R[a]
WMEM = 0x10  # b -> M[a]
CALL = 0x11  # push IP + 1; goto a
RET  = 0x12  # goto [stack]
OUT  = 0x13  # a -> console
IN   = 0x14  # console -> R[a] or M[a]
NOOP = 0x15
