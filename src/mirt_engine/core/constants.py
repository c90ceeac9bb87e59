# Internal code for an unanswered item
MISSING_VALUE = -1

# Character used for an unanswered item in answer strings
MISSING_CHAR = "*"

CORRECT_CHAR = "1"
INCORRECT_CHAR = "0"
