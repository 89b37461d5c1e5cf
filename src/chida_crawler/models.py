"""Data models."""

from dataclasses import dataclass, field

DEFAULT_CAPACITY = 32
DEFAULT_DIVISION_NAME = "일반부"
DEFAULT_ORGANIZER = "KATO"
UNKNOWN_CITY = "미정"

STATUS_RECRUITING = "recruiting"
STATUS_UPCOMING = "upcoming"
STATUS_CLOSED = "closed"
STATUS_DRAFT = "draft"  # persisted parent status, pending admin review


@dataclass(frozen=True)
class CrawledDivision:
    name: str
    date_start: str  # YYYY-MM-DD
    date_end: str | None = None
    time_start: str | None = None  # HH:MM
    fee: int = 0  # whole won, 0 = not specified
    capacity: int = DEFAULT_CAPACITY
    status: str = STATUS_RECRUITING


@dataclass(frozen=True)
class CrawledTournament:
    title: str
    location_city: str
    crawled_url: str
    divisions: list[CrawledDivision] = field(default_factory=list)
    location_detail: str = ""
    organizer: str = DEFAULT_ORGANIZER
    thumbnail_url: str = ""
    description: str = ""
    registration_start_date: str | None = None
    registration_end_date: str | None = None
    status: str = STATUS_RECRUITING

    @property
    def earliest_date(self) -> str:
        """Minimum division start date, "" when there are no divisions."""
        return min((d.date_start for d in self.divisions), default="")


@dataclass(frozen=True)
class DetailFields:
    """Fields extracted from one detail page. Every field may be empty."""

    location_detail: str = ""
    thumbnail_url: str = ""
    description: str = ""
    registration_start_date: str | None = None
    registration_end_date: str | None = None
    fee: int = 0
    divisions: list[CrawledDivision] = field(default_factory=list)


@dataclass(frozen=True)
class ListItem:
    title: str
    date_text: str
    url: str


@dataclass(frozen=True)
class LegacyTournament:
    """Flat single-date record shape used before divisions existed."""

    title: str
    date: str
    location: str
    status: str = ""
    site_url: str = ""
    level: str = ""
    organizer: str = ""
    description: str = ""

    def to_crawled(self) -> CrawledTournament:
        return CrawledTournament(
            title=self.title,
            location_city=self.location,
            crawled_url=self.site_url,
            organizer=self.organizer or DEFAULT_ORGANIZER,
            description=self.description,
            status=self.status or STATUS_RECRUITING,
            divisions=[CrawledDivision(
                name=self.level or DEFAULT_DIVISION_NAME,
                date_start=self.date,
                fee=0,
                capacity=DEFAULT_CAPACITY,
                status=self.status or STATUS_RECRUITING,
            )],
        )


@dataclass
class InsertResult:
    success: bool
    message: str
    id: str | None = None
    duplicate: bool = False


@dataclass
class BatchItemResult:
    title: str
    success: bool
    message: str
    duplicate: bool = False


@dataclass
class BatchReport:
    total: int = 0
    success: int = 0
    skipped: int = 0
    failed: int = 0
    results: list[BatchItemResult] = field(default_factory=list)
