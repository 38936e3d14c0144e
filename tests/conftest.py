import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from poolbuilder.db.database import get_session
from poolbuilder.models.booster import BoosterDefinition
from poolbuilder.models.card import Card
from poolbuilder.models.db import Base
from poolbuilder.models.mtg_set import SetInfo
from poolbuilder.services.catalog import CatalogProvider


def make_card(
    card_id: str,
    rarity: str,
    collector_number: str,
    *,
    name: str | None = None,
    cmc: float = 2.0,
    colors: tuple[str, ...] = (),
    type_line: str = "Creature — Test",
    **extra,
) -> Card:
    return Card(
        id=card_id,
        name=name or card_id.upper(),
        rarity=rarity,
        cmc=cmc,
        colors=colors,
        type_line=type_line,
        collector_number=collector_number,
        **extra,
    )


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def catalog_cards() -> list[Card]:
    """Tiny set: four commons, two uncommons, one rare, one mythic."""
    return [
        make_card("c1", "common", "1", colors=("W",), cmc=1.0),
        make_card("c2", "common", "2", colors=("U",), cmc=2.0),
        make_card("c3", "common", "3", colors=("B",), cmc=3.0),
        make_card("c4", "common", "4", colors=("R",), cmc=4.0),
        make_card("u1", "uncommon", "5", colors=("G",), cmc=2.0),
        make_card("u2", "uncommon", "6", colors=("W", "U"), cmc=3.0),
        make_card("r1", "rare", "7", colors=("B",), cmc=5.0),
        make_card("m1", "mythic", "8", colors=("R",), cmc=7.0),
    ]


@pytest.fixture
def play_booster() -> BoosterDefinition:
    """One rare-or-mythic, two uncommons and three commons per booster."""
    return BoosterDefinition.from_dict(
        {
            "slots": [
                {
                    "rarities": ["rare", "mythic"],
                    "count": 1,
                    "mythicRate": 0,
                    "pool": {"nonfoil": ["7-8"]},
                },
                {"rarities": ["uncommon"], "count": 2, "pool": {"nonfoil": ["5-6"]}},
                {"rarities": ["common"], "count": 3, "pool": {"nonfoil": ["1-4"]}},
            ]
        },
        set_code="tst",
        product="play",
    )


@pytest.fixture
def basic_lands() -> dict[str, Card]:
    names = {"W": "Plains", "U": "Island", "B": "Swamp", "R": "Mountain", "G": "Forest"}
    return {
        color: make_card(
            f"basic-{color}",
            "common",
            "270",
            name=name,
            cmc=0.0,
            type_line=f"Basic Land — {name}",
        )
        for color, name in names.items()
    }


class FakeCatalog(CatalogProvider):
    """In-memory catalog serving a single set."""

    def __init__(
        self,
        sets: list[SetInfo],
        cards: list[Card],
        definition: BoosterDefinition | None,
        basic_lands: dict[str, Card] | None = None,
    ) -> None:
        self.sets = sets
        self.cards = cards
        self.definition = definition
        self.basic_lands = basic_lands or {}
        self.requested_cards: list[str] = []

    async def fetch_sets(self) -> list[SetInfo]:
        return list(self.sets)

    async def fetch_booster_definition(self, set_code: str) -> BoosterDefinition | None:
        return self.definition

    async def fetch_set_cards(self, set_code: str) -> list[Card]:
        self.requested_cards.append(set_code)
        return list(self.cards)

    async def fetch_basic_lands(self, set_code: str) -> dict[str, Card]:
        return dict(self.basic_lands)


@pytest.fixture
def daily_sets() -> list[SetInfo]:
    """Seven sets after the cutoff plus two older ones that never rotate in."""
    old = [
        SetInfo("lea", "Limited Edition Alpha", "1993-08-05"),
        SetInfo("m19", "Core 2019", "2018-07-13"),
    ]
    recent = [
        SetInfo(code, code.upper(), f"202{i}-01-15")
        for i, code in enumerate(["iko", "znr", "khm", "stx", "afr", "mid", "vow"])
    ]
    return old[:1] + recent[:3] + old[1:] + recent[3:]


@pytest.fixture
def fake_catalog(daily_sets, catalog_cards, play_booster, basic_lands) -> FakeCatalog:
    return FakeCatalog(daily_sets, catalog_cards, play_booster, basic_lands)


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """Provide an async test client with overridden database session."""
    from poolbuilder.main import app

    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
