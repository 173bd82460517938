"""Driver state models"""

from expbackoff.domain.models.state import DriverState

__all__ = ["DriverState"]
