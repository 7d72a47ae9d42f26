from uuid import uuid4

import pytest

from macro_tracker.domain.errors import ValidationError
from macro_tracker.services.products import ProductService, clean_product_payload
from tests.conftest import InMemoryProductRepository


def _payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "product_name": "  Greek Yogurt  ",
        "brand": "Fage",
        "serving_size": "170",
        "calories": 100,
        "protein": "18",
        "carbs": 6,
        "fat": 0,
    }
    payload.update(overrides)
    return payload


def test_clean_payload_trims_and_parses_numbers() -> None:
    cleaned = clean_product_payload(_payload(brand="  ", notes=" tub "))

    assert cleaned["product_name"] == "Greek Yogurt"
    assert cleaned["brand"] is None
    assert cleaned["notes"] == "tub"
    assert cleaned["serving_size"] == 170.0
    assert cleaned["serving_unit"] == "g"
    assert cleaned["protein"] == 18.0
    assert cleaned["fiber"] is None
    assert cleaned["is_favorite"] is False


def test_clean_payload_collects_every_error() -> None:
    with pytest.raises(ValidationError) as excinfo:
        clean_product_payload(
            _payload(product_name=" ", serving_size=0, calories="lots", fiber=-1)
        )

    assert excinfo.value.errors == [
        "Product name is required.",
        "Serving size must be a positive number.",
        "Calories must be a non-negative number.",
        "Fiber must be a non-negative number.",
    ]


def test_create_and_list_products() -> None:
    service = ProductService(InMemoryProductRepository())
    service.create_product(_payload())
    service.create_product(_payload(product_name="Oat Bar", is_favorite=True))

    assert [p.product_name for p in service.list_products("  yog ")] == [
        "Greek Yogurt"
    ]
    assert [p.product_name for p in service.list_products(favorites_only=True)] == [
        "Oat Bar"
    ]
    assert len(service.list_products("   ")) == 2


def test_update_and_delete_missing_product() -> None:
    service = ProductService(InMemoryProductRepository())

    assert service.update_product(uuid4(), _payload()) is None
    assert service.delete_product(uuid4()) is False


def test_calculate_scales_by_serving() -> None:
    service = ProductService(InMemoryProductRepository())
    product = service.create_product(_payload())

    macros = service.calculate(product.id, "85")

    assert macros is not None
    assert macros.calories == pytest.approx(50)
    assert macros.protein == pytest.approx(9)


@pytest.mark.parametrize("quantity", [0, -1, "abc", None])
def test_calculate_rejects_bad_quantity(quantity: object) -> None:
    service = ProductService(InMemoryProductRepository())
    product = service.create_product(_payload())

    with pytest.raises(ValidationError):
        service.calculate(product.id, quantity)


def test_calculate_missing_product_returns_none() -> None:
    service = ProductService(InMemoryProductRepository())

    assert service.calculate(uuid4(), 10) is None


def test_find_by_name_ignores_blank_names() -> None:
    service = ProductService(InMemoryProductRepository())
    service.create_product(_payload())

    assert service.find_by_name("   ") is None
    assert service.find_by_name(" Greek Yogurt ") is not None
    assert service.find_by_name("greek   yogurt") is not None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("false", False), ("False ", False), ("0", False), (0, False), (None, False),
     ("true", True), ("yes", True), (1, True), (True, True)],
)
def test_clean_payload_parses_favorite_flag(raw: object, expected: bool) -> None:
    assert clean_product_payload(_payload(is_favorite=raw))["is_favorite"] is expected


def test_clean_payload_rejects_unknown_favorite_text() -> None:
    with pytest.raises(ValidationError) as excinfo:
        clean_product_payload(_payload(is_favorite="maybe"))

    assert excinfo.value.errors == ["Favorite must be true or false."]
