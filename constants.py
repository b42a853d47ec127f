"""Constants used throughout the Hoard CLI tool"""

# Parameter delimiters
DEFAULT_PARAMETER_TOKEN = "#"
DEFAULT_PARAMETER_ENDING_TOKEN = "!"
PARAMETER_ESCAPE = "\\"

# Namespaces and search
DEFAULT_NAMESPACE = "default"
DEFAULT_QUERY_PREFIX = "  >"
TAG_SEPARATOR = ","

# Colors (r, g, b)
DEFAULT_COLORS = {
    'primary': (242, 229, 188),
    'secondary': (181, 118, 20),
    'tertiary': (50, 48, 47),
    'command': (180, 118, 20),
}

# Execution modes for the resolved command
EXECUTION_MODES = ['print', 'copy', 'run']
DEFAULT_EXECUTION_MODE = 'print'

# Configuration
CONFIG_DIR = ".config/hoard"
CONFIG_FILE = "config.yml"
TROVE_FILE = "trove.yml"
ENV_CONFIG_PATH = "HOARD_CONFIG"
ENV_GPT_API_KEY = "HOARD_GPT_API_KEY"

# Application metadata
APP_NAME = "Hoard"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Hoard parameterized shell commands and fetch them from an interactive search"
TROVE_VERSION = "1.0"
