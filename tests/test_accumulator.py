import itertools

from county_tools.scrapers import RecordAccumulator


def test_add_creates_and_sums():
    acc = RecordAccumulator()
    acc.add("Boone County", "cases", 5)
    acc.add("Boone County", "cases", 2)
    acc.add("Boone County", "deaths", 1)

    assert acc == {"Boone County": {"cases": 7, "deaths": 1}}
    assert "Boone County" in acc
    assert len(acc) == 1


def test_defaults_only_on_creation():
    acc = RecordAccumulator()
    acc.add("Boone County", "cases", 5, deaths=0)
    acc.add("Boone County", "cases", 5, deaths=10)
    acc.add("Cole County", "deaths", 3)

    assert acc["Boone County"] == {"cases": 10, "deaths": 0}
    assert acc["Cole County"] == {"deaths": 3}


def test_invalid_region_contributes_nothing():
    acc = RecordAccumulator()
    acc.add(None, "cases", 5)
    acc.ensure(None, tested=0)
    acc.set_default(None, "publishedDate", "2020-04-01T00:00:00.000Z")

    assert len(acc) == 0


def test_ensure_and_set_default():
    acc = RecordAccumulator()
    acc.add("Boone County", "tested", 4)
    acc.ensure("Boone County", tested=0, positives=0)
    acc.ensure("Cole County", tested=0, positives=0)
    acc.set_default("Boone County", "publishedDate", "a")
    acc.set_default("Boone County", "publishedDate", "b")

    assert acc == {
        "Boone County": {"tested": 4, "positives": 0, "publishedDate": "a"},
        "Cole County": {"tested": 0, "positives": 0},
    }


def test_accumulation_is_commutative():
    triples = [
        ("Boone County", "cases", 5),
        ("Jackson County", "cases", 10),
        ("Boone County", "deaths", 1),
        ("Jackson County", "cases", 2),
        ("Boone County", "cases", 3),
    ]
    expected = {
        "Boone County": {"cases": 8, "deaths": 1},
        "Jackson County": {"cases": 12},
    }
    for order in itertools.permutations(triples):
        acc = RecordAccumulator()
        for region, metric, delta in order:
            acc.add(region, metric, delta)
        assert acc == expected


def test_records_is_a_copy():
    acc = RecordAccumulator()
    acc.add("Boone County", "cases", 5)
    records = acc.records()
    records["Boone County"]["cases"] = 100

    assert acc["Boone County"]["cases"] == 5
    assert list(acc) == ["Boone County"]
