"""Permission helpers."""

def is_creator(user, bill):
    return getattr(bill, "created_by", None) == getattr(user, "id", None)


def can_view(user, bill):
    """Creators and participants registered under the user's email see a bill."""
    if is_creator(user, bill):
        return True
    return bill.find_participant_by_email(getattr(user, "email", None)) is not None
