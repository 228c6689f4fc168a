# Bounds on the number of ranked choices in one enrollment request.
MIN_CHOICES = 1
MAX_CHOICES = 3

# Ranks are 1-based: rank 1 is the student's first choice.
RANKS = tuple(range(1, MAX_CHOICES + 1))

# Sub-codes attached to InvalidRequestError, in the order the checks run.
INVALID_CHOICE_COUNT = "INVALID_CHOICE_COUNT"
UNKNOWN_STUDENT = "UNKNOWN_STUDENT"
UNKNOWN_COURSE = "UNKNOWN_COURSE"
DUPLICATE_CHOICE = "DUPLICATE_CHOICE"
ALREADY_SUBMITTED = "ALREADY_SUBMITTED"
ALLOCATION_CLOSED = "ALLOCATION_CLOSED"

