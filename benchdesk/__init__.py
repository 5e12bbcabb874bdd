__version__ = "0.1.0"

from benchdesk.client import BenchDesk, connect  # noqa: E402
from benchdesk.errors import ApiError  # noqa: E402

__all__ = ["ApiError", "BenchDesk", "connect", "__version__"]
