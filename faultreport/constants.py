"""Constants used throughout the faultreport library."""

# Classification used for exceptions without a known severity
GENERIC_NAME = "EXCEPTION"

# Left indent of the title line
BASE_INDENT = 4

# Extra columns between the title tag and the report body
BODY_INDENT_PAD = 5

# Width of the frame number column; frame locations line up under it
FRAME_NUMBER_WIDTH = 4

# Keyed collections larger than this are left out of argument lists
MAX_RECURSIVE_ITEMS = 5

# Exit status used when a fatal fault halts the process
FATAL_EXIT_CODE = 255

# Call type shown between class and function for bound calls
CALL_TYPE_ATTRIBUTE = "."

# Type name for faults raised through trigger_error()
ERROR_FAULT_NAME = "ErrorFault"
