"""Assignment board engine.

Pure read-model helpers (filters, workload, grouping), the assignment
command executor, and the data orchestrator that ties them to an item
store. Nothing in here knows about HTTP or the database.
"""

from .executor import AssignmentExecutor  # noqa: F401
from .filters import AssignmentFilters, filter_items, matches  # noqa: F401
from .grouping import InquiryGroup, group_by_inquiry, most_urgent_priority  # noqa: F401
from .notifier import Notice, Notifier  # noqa: F401
from .orchestrator import AssignmentsData  # noqa: F401
from .workload import Workload, aggregate  # noqa: F401
