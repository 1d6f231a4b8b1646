#
# Process-wide defaults for sleepsort.
#
# These are set by `sleepsort.setup` and read at call time, so changing
# them affects every later sort that does not pass its own value.

BACKENDS = ('trio', 'asyncio')

backend = 'trio'

# Seconds slept per unit of value. One second per unit is the classic
# behaviour; tests and demos usually want something smaller.
unit = 1.0
