from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from recipes_api.memory_storage import InMemoryRecipeStorage, load_seed
from recipes_api.models import Recipe
from recipes_api.storage import InvalidRecipeError, RecipeNotFoundError


def add(storage: InMemoryRecipeStorage, name: str, tags=None) -> Recipe:
    return storage.add_recipe(
        name=name,
        tags=tags or [],
        ingredients=["salt"],
        instructions=["stir"],
    )


def test_add_assigns_id_and_timestamp():
    storage = InMemoryRecipeStorage()
    started = datetime.now(timezone.utc)

    recipe = add(storage, "Stew")

    assert recipe.id
    assert recipe.published_at >= started
    assert storage.get_recipe(recipe.id) == recipe


def test_add_requires_name():
    storage = InMemoryRecipeStorage()

    with pytest.raises(InvalidRecipeError):
        add(storage, "")

    assert len(storage) == 0


def test_concurrent_adds_produce_distinct_ids():
    storage = InMemoryRecipeStorage()

    with ThreadPoolExecutor(max_workers=8) as pool:
        recipes = list(pool.map(lambda n: add(storage, f"Recipe {n}"), range(200)))

    assert len({recipe.id for recipe in recipes}) == 200
    assert len(storage.list_recipes()) == 200


def test_list_returns_copies_in_insertion_order():
    storage = InMemoryRecipeStorage()
    first = add(storage, "First")
    second = add(storage, "Second")

    listed = storage.list_recipes()
    assert [recipe.id for recipe in listed] == [first.id, second.id]

    listed[0].name = "Changed"
    listed[0].tags.append("mutated")
    listed.clear()
    assert storage.get_recipe(first.id).name == "First"
    assert storage.get_recipe(first.id).tags == []
    assert len(storage) == 2


def test_missing_ids_raise_not_found():
    storage = InMemoryRecipeStorage()
    recipe = add(storage, "Toast")
    storage.delete_recipe(recipe.id)

    for recipe_id in ("never-inserted", recipe.id):
        with pytest.raises(RecipeNotFoundError):
            storage.get_recipe(recipe_id)
        with pytest.raises(RecipeNotFoundError):
            storage.update_recipe(recipe_id, name="x", tags=[], ingredients=[], instructions=[])
        with pytest.raises(RecipeNotFoundError):
            storage.delete_recipe(recipe_id)


def test_not_found_is_a_key_error():
    with pytest.raises(KeyError):
        InMemoryRecipeStorage().get_recipe("nope")


def test_update_preserves_id_and_published_at():
    storage = InMemoryRecipeStorage()
    recipe = add(storage, "Chili", tags=["spicy"])

    updated = storage.update_recipe(
        recipe.id,
        name="Mild Chili",
        tags=["mild"],
        ingredients=["beans"],
        instructions=["simmer"],
    )

    assert updated.id == recipe.id
    assert updated.published_at == recipe.published_at
    assert updated.name == "Mild Chili"
    assert updated.tags == ["mild"]
    assert updated.ingredients == ["beans"]
    assert updated.instructions == ["simmer"]
    assert storage.get_recipe(recipe.id) == updated


def test_invalid_update_leaves_recipe_unchanged():
    storage = InMemoryRecipeStorage()
    recipe = add(storage, "Risotto")

    with pytest.raises(InvalidRecipeError):
        storage.update_recipe(recipe.id, name="", tags=["x"], ingredients=[], instructions=[])

    assert storage.get_recipe(recipe.id) == recipe


def test_delete_closes_the_gap():
    storage = InMemoryRecipeStorage()
    first, middle, last = (add(storage, name) for name in ("A", "B", "C"))

    storage.delete_recipe(middle.id)

    assert [recipe.id for recipe in storage.list_recipes()] == [first.id, last.id]


def test_search_matches_tags_case_insensitively():
    storage = InMemoryRecipeStorage()
    cake = add(storage, "Cake", tags=["dessert", "Sweet"])
    add(storage, "Salad", tags=["side"])
    fudge = add(storage, "Fudge", tags=["DESSERT", "dessert"])

    assert storage.search_recipes("Dessert") == [cake, fudge]
    assert storage.search_recipes("sweet") == [cake]


def test_search_does_not_match_substrings_or_empty_tags():
    storage = InMemoryRecipeStorage()
    add(storage, "Cake", tags=["dessert"])

    assert storage.search_recipes("dess") == []
    assert storage.search_recipes("nonexistent") == []
    assert storage.search_recipes("") == []


def test_seed_fills_missing_ids_and_drops_duplicates():
    published = datetime(2021, 1, 17, tzinfo=timezone.utc)
    storage = InMemoryRecipeStorage(
        [
            Recipe(id="a", name="One", published_at=published),
            Recipe(id="", name="Two"),
            Recipe(id="a", name="Duplicate"),
        ]
    )

    recipes = storage.list_recipes()
    assert [recipe.name for recipe in recipes] == ["One", "Two"]
    assert recipes[0].published_at == published
    assert recipes[1].id
    assert recipes[1].published_at is not None


def test_load_seed_reads_recipe_array(tmp_path):
    seed_file = tmp_path / "recipes.json"
    seed_file.write_text(
        '[{"id": "x1", "name": "Tacos", "tags": ["mexican"],'
        ' "ingredients": ["tortilla"], "instructions": ["fill"],'
        ' "publishedAt": "2021-01-17T19:28:52Z"}]',
        encoding="utf-8",
    )

    recipes, diagnostic = load_seed(seed_file)

    assert diagnostic is None
    assert recipes == [
        Recipe(
            id="x1",
            name="Tacos",
            tags=["mexican"],
            ingredients=["tortilla"],
            instructions=["fill"],
            published_at=datetime(2021, 1, 17, 19, 28, 52, tzinfo=timezone.utc),
        )
    ]


@pytest.mark.parametrize("content", ["{broken", '{"name": "not a list"}', '[{"tags": "oops"}]'])
def test_load_seed_tolerates_bad_files(tmp_path, content):
    seed_file = tmp_path / "recipes.json"
    seed_file.write_text(content, encoding="utf-8")

    recipes, diagnostic = load_seed(seed_file)

    assert recipes == []
    assert diagnostic


def test_from_file_starts_empty_when_file_is_missing(tmp_path):
    storage = InMemoryRecipeStorage.from_file(tmp_path / "missing.json")

    assert storage.list_recipes() == []


def test_load_seed_accepts_nanosecond_timestamps(tmp_path):
    seed_file = tmp_path / "recipes.json"
    seed_file.write_text(
        '[{"id": "n1", "name": "Ramen", "publishedAt": "2021-01-17T19:28:52.803062123Z"}]',
        encoding="utf-8",
    )

    recipes, diagnostic = load_seed(seed_file)

    assert diagnostic is None
    assert recipes[0].published_at == datetime(2021, 1, 17, 19, 28, 52, 803062, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("stamp", "microsecond"),
    [
        ("2021-01-17T19:28:52.80306Z", 803060),
        ("2021-01-17T19:28:52.8Z", 800000),
        ("2021-01-17T19:28:52.8030Z", 803000),
    ],
)
def test_load_seed_accepts_short_fractions(tmp_path, stamp, microsecond):
    seed_file = tmp_path / "recipes.json"
    seed_file.write_text(f'[{{"id": "a", "name": "x", "publishedAt": "{stamp}"}}]', encoding="utf-8")

    recipes, diagnostic = load_seed(seed_file)

    assert diagnostic is None
    assert recipes[0].published_at == datetime(2021, 1, 17, 19, 28, 52, microsecond, tzinfo=timezone.utc)


def test_add_accepts_whitespace_name():
    storage = InMemoryRecipeStorage()

    recipe = add(storage, " ")

    assert storage.get_recipe(recipe.id).name == " "
