import datetime


def week_dates(offset: int = 0, today: datetime.date | None = None) -> list[datetime.date]:
    """Return the seven dates (Sunday to Saturday) of the week ``offset`` weeks from now."""
    today = today or datetime.date.today()
    since_sunday = (today.weekday() + 1) % 7
    start = today - datetime.timedelta(days=since_sunday) + datetime.timedelta(weeks=offset)
    return [start + datetime.timedelta(days=i) for i in range(7)]
