"""
Injury constraint inference.

Turns the profile's injury list into the set of movement restrictions
the template library understands.
"""

from .models import ConstraintSet, UserProfile


def infer_constraints(profile: UserProfile) -> ConstraintSet:
    """
    Derive movement restrictions from the profile's injuries.

    Any shoulder injury sets the ``shoulder`` flag.  Other areas are
    recorded on the profile but do not restrict templates yet.

    Args:
        profile: User profile

    Returns:
        ConstraintSet (empty when there are no injuries)
    """
    shoulder = any(injury.area == "shoulder" for injury in profile.injuries or [])
    return ConstraintSet(shoulder=shoulder)
