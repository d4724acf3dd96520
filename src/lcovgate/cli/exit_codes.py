# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_THRESHOLD = 2  # A checked file is not fully covered
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed lcov.info)
EXIT_NOINPUT = 66  # Input file not found (e.g., lcov.info missing)
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad coverage.ignore.json)
