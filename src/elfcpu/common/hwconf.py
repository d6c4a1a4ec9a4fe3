REGISTER_COUNT        = 6         # Device register file
SAMPLE_REGISTER_COUNT = 4         # Register file seen in before/after samples

IP_DIRECTIVE = '#ip'              # Binds a register to the instruction pointer

STEP_LIMIT = 100_000_000          # Default guard for IP-bound runs from the command line
