import warnings

# Suppress Google SDK FutureWarning messages about Python version deprecation
# These clutter the CLI output on older interpreters.
warnings.filterwarnings("ignore", category=FutureWarning, module="google.api_core")
warnings.filterwarnings("ignore", category=FutureWarning, module="google.auth")
warnings.filterwarnings("ignore", category=FutureWarning, module="googleapiclient")
