import pytest

from villagewar.components.fortress import calculate_fortress_stats, default_fortress_buildings
from villagewar.errors import InvalidInput


def test_default_buildings_at_level_one():
    stats = calculate_fortress_stats(default_fortress_buildings())
    assert stats.fort_hp == 400
    assert stats.archer_slots == 5
    assert stats.garrison_warriors == 5
    assert stats.garrison_archers == 5


def test_upgrades_scale_building_effects():
    buildings = [b.upgraded() if b.id == "palisade_wall" else b for b in default_fortress_buildings()]
    buildings = [b.upgraded().upgraded() if b.id == "watch_post" else b for b in buildings]
    stats = calculate_fortress_stats(buildings)
    assert stats.fort_hp == 800
    assert stats.archer_slots == 15


def test_buildings_cannot_exceed_max_level():
    palisade = default_fortress_buildings()[0]
    for _ in range(4):
        palisade = palisade.upgraded()
    assert palisade.level == 5
    with pytest.raises(InvalidInput):
        palisade.upgraded()
