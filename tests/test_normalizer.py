import pytest

from storefront.errors import NotFoundError, ProductValidationError
from storefront.schemas.product import ProductFields, normalize_product_form, parse_product_id


def form(**overrides):
    data = {"name": "Pen", "description": "", "price": "9.50", "image_url": "", "stock": "100"}
    data.update(overrides)
    return data


def test_pen_example():
    fields = normalize_product_form(form())
    assert fields == ProductFields(name="Pen", description=None, price=9.5, image_url=None, stock=100)


def test_optional_fields_pass_through_unchanged():
    fields = normalize_product_form(
        form(description="  Blue ink  ", image_url="not even a url")
    )
    assert fields.description == "  Blue ink  "
    assert fields.image_url == "not even a url"


def test_missing_optional_keys_become_none():
    fields = normalize_product_form({"name": "Mug", "price": "3", "stock": "0"})
    assert fields.description is None
    assert fields.image_url is None
    assert fields.stock == 0


@pytest.mark.parametrize("name", ["", "   ", None])
def test_name_required(name):
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(name=name))


def test_name_is_trimmed():
    assert normalize_product_form(form(name="  Pen  ")).name == "Pen"


@pytest.mark.parametrize("price", ["", "abc", "nan", "inf", "9,50"])
def test_bad_price_rejected(price):
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(price=price))


@pytest.mark.parametrize("stock", ["", "ten", "1.5"])
def test_bad_stock_rejected(stock):
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(stock=stock))


def test_negative_price_rejected():
    with pytest.raises(ProductValidationError, match="negative"):
        normalize_product_form(form(price="-5"))


def test_negative_stock_rejected():
    with pytest.raises(ProductValidationError, match="negative"):
        normalize_product_form(form(stock="-1"))


def test_zero_price_and_stock_accepted():
    fields = normalize_product_form(form(price="0", stock="0"))
    assert fields.price == 0.0
    assert fields.stock == 0


def test_non_string_values_are_coerced():
    fields = normalize_product_form(form(price=12, stock=4))
    assert fields.price == 12.0
    assert fields.stock == 4


def test_whitespace_around_numbers_is_ignored():
    fields = normalize_product_form(form(price=" 1.25 ", stock=" 7 "))
    assert fields.price == 1.25
    assert fields.stock == 7


def test_stock_beyond_integer_column_rejected():
    with pytest.raises(ProductValidationError, match="exceed"):
        normalize_product_form(form(stock="99999999999999999999"))


def test_stock_at_integer_column_limit_accepted():
    assert normalize_product_form(form(stock=str(2**31 - 1))).stock == 2**31 - 1


@pytest.mark.parametrize("value", ["1_000", "١٢", "１２"])
def test_only_ascii_digits_accepted(value):
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(stock=value))
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(price=value))


@pytest.mark.parametrize("price", ["1e400", "-inf", "."])
def test_price_out_of_float_range_rejected(price):
    with pytest.raises(ProductValidationError):
        normalize_product_form(form(price=price))


@pytest.mark.parametrize("raw", ["0", "-1", "+5", "1_0", "١٢", "99999999999999999999", str(2**63)])
def test_unusable_product_ids_are_not_found(raw):
    with pytest.raises(NotFoundError):
        parse_product_id(raw)


def test_product_id_upper_limit():
    assert parse_product_id(str(2**63 - 1)) == 2**63 - 1
