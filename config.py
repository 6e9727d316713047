# Main system configuration
CONFIG_PATH = "API/config.ini"  # INI file describing channels and sampling
CHANNEL_SECTION_KEYWORD = "DAQmxChannel"  # Sections whose name contains this create channels
TASK_SECTION_KEYWORD = "DAQmxTask"  # First section containing this configures the sample clock

# Acquisition
READ_TIMEOUT_S = 10.0  # Blocking read timeout per chunk
READ_INTERVAL_S = 1.0  # Seconds of data per read (samples per read = rate * interval)
DEFAULT_SAMPLES_PER_CHAN = 1000  # Buffer size used with --rate when the file has no task section

# Logging
LOG_LEVEL = "INFO"

# Debugging
DEBUG_ENABLE = False           # Master debug switch
DEBUG_RAW_SUMMARY = True       # Log per-read summaries (min/max/avg per channel)
DEBUG_SAMPLE_EVERY_N = 10      # How often to log summaries (reads)
