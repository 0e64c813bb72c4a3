"""
Tests for JSON Schema Contract Validators and curve serialization

Комплексное тестирование контракта документа кривой:
- Валидность самой схемы
- Валидация правильных документов
- Детекция нарушений required полей, типов, enum/pattern
- Round-trip кривых всех числовых семейств
- Интеграция с Pydantic моделью и конструктором Curve
"""

import json
from decimal import Decimal
from fractions import Fraction
from pathlib import Path

import pydantic
import pytest
from jsonschema import ValidationError

from src.core.contracts import validators as validators_module
from src.core.contracts import (
    CURVE_SCHEMA_VERSION,
    CurveDocument,
    CurveDocumentValidator,
    SchemaLoader,
    curve_from_document,
    curve_to_document,
    decode_value,
    dumps_curve,
    encode_value,
    loads_curve,
    validate_curve_document,
)
from src.core.domain import Curve, InvalidCurve
from src.core.math.interpolation import NumberFamily


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_document():
    """Валидный документ кривой для тестирования."""
    return {
        "schema_version": "1",
        "x_family": "float",
        "y_family": "fraction",
        "points": [[0.0, "0"], [2.5, "1/3"], [10.0, "1"]],
    }


# =============================================================================
# SCHEMA LOADER
# =============================================================================


def test_schema_loader_loads_curve_schema():
    """Схема curve загружается и проходит мета-валидацию."""
    loader = SchemaLoader()
    schema = loader.load_schema("curve")

    assert schema["title"] == "Curve"
    assert "points" in schema["required"]


def test_schema_loader_default_dir_is_package_data():
    """Каталог схем по умолчанию лежит внутри пакета, рядом с validators.py."""
    loader = SchemaLoader()

    assert loader.schema_dir == Path(validators_module.__file__).parent / "schema"
    assert (loader.schema_dir / "curve.json").is_file()


def test_schema_loader_caches_schemas():
    """Повторная загрузка возвращает кэшированный объект."""
    loader = SchemaLoader()

    schema1 = loader.load_schema("curve")
    schema2 = loader.load_schema("curve")

    assert schema1 is schema2


def test_schema_loader_raises_on_missing_schema():
    """Отсутствующая схема → FileNotFoundError."""
    loader = SchemaLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_schema("non_existent_schema")


def test_schema_loader_raises_on_missing_directory(tmp_path):
    """Отсутствующая директория схем → RuntimeError."""
    with pytest.raises(RuntimeError, match="Schema directory not found"):
        SchemaLoader(tmp_path / "missing")


def test_schema_loader_rejects_invalid_schema(tmp_path):
    """Невалидная JSON Schema → ValueError."""
    (tmp_path / "broken.json").write_text(json.dumps({"type": 42}), encoding="utf-8")
    loader = SchemaLoader(tmp_path)

    with pytest.raises(ValueError, match="Invalid JSON Schema"):
        loader.load_schema("broken")


# =============================================================================
# CURVE DOCUMENT VALIDATOR
# =============================================================================


def test_curve_validator_accepts_valid_data(valid_document):
    """Валидный документ проходит схему."""
    validator = CurveDocumentValidator()
    validator.validate(valid_document)
    assert validator.is_valid(valid_document)


def test_curve_validate_function(valid_document):
    """Convenience функция не бросает для валидного документа."""
    validate_curve_document(valid_document)


def test_curve_rejects_missing_required_field(valid_document):
    """Отсутствие points → ValidationError."""
    del valid_document["points"]

    with pytest.raises(ValidationError, match="points"):
        validate_curve_document(valid_document)


def test_curve_rejects_empty_points(valid_document):
    """Пустой список точек → ValidationError."""
    valid_document["points"] = []

    with pytest.raises(ValidationError):
        validate_curve_document(valid_document)


def test_curve_rejects_invalid_family(valid_document):
    """Неизвестное семейство → ValidationError."""
    valid_document["x_family"] = "complex"

    with pytest.raises(ValidationError):
        validate_curve_document(valid_document)


def test_curve_rejects_wrong_schema_version(valid_document):
    """schema_version отличается от "1" → ValidationError."""
    valid_document["schema_version"] = "2"

    with pytest.raises(ValidationError):
        validate_curve_document(valid_document)


def test_curve_rejects_additional_properties(valid_document):
    """Лишние поля запрещены."""
    valid_document["name"] = "arrival delay"

    with pytest.raises(ValidationError):
        validate_curve_document(valid_document)


@pytest.mark.parametrize(
    "point",
    [[1.0], [1.0, "1", 2], [True, "1"], [1.0, "one"], [1.0, None], "1.0"],
)
def test_curve_rejects_malformed_point(valid_document, point):
    """Точка не пара чисел/числовых строк → ValidationError."""
    valid_document["points"] = [point]

    with pytest.raises(ValidationError):
        validate_curve_document(valid_document)


def test_curve_validator_reports_all_errors(valid_document):
    """iter_errors возвращает все нарушения сразу."""
    valid_document["x_family"] = "complex"
    valid_document["points"] = []

    errors = list(CurveDocumentValidator().iter_errors(valid_document))
    assert len(errors) == 2


# =============================================================================
# VALUE CODEC
# =============================================================================


def test_encode_value():
    """Кодирование значений по типу."""
    assert encode_value(3) == 3
    assert encode_value(0.1) == 0.1
    assert encode_value(Fraction(1, 3)) == "1/3"
    assert encode_value(Fraction(2)) == "2/1"
    assert encode_value(Decimal("0.50")) == "0.50"


def test_decode_value():
    """Декодирование по объявленному семейству."""
    assert decode_value("1/3", NumberFamily.RATIONAL) == Fraction(1, 3)
    assert decode_value("0.50", NumberFamily.DECIMAL) == Decimal("0.50")
    assert decode_value(7, NumberFamily.RATIONAL) == 7
    assert decode_value(0.25, NumberFamily.FLOAT) == 0.25
    assert decode_value("1/2", NumberFamily.FLOAT) == Fraction(1, 2)
    assert decode_value("4/2", NumberFamily.INTEGER) == Fraction(2)


def test_decode_value_rejects_string_on_float_axis():
    """Строка на оси float → ValueError."""
    with pytest.raises(ValueError, match="not allowed"):
        decode_value("0.5", NumberFamily.FLOAT)


# =============================================================================
# ROUND-TRIP
# =============================================================================


def test_document_shape():
    """Форма документа для int/float кривой."""
    curve = Curve([(0, 0.0), (10, 1.0)])

    assert curve_to_document(curve) == {
        "schema_version": CURVE_SCHEMA_VERSION,
        "x_family": "int",
        "y_family": "float",
        "points": [[0, 0.0], [10, 1.0]],
    }


def test_round_trip_float():
    """float: точные значения (кратчайший repr) и порядок сохраняются."""
    curve = Curve([(0.1, 0.0), (0.30000000000000004, 1 / 3), (2.5, 1.0)])

    restored = loads_curve(dumps_curve(curve))

    assert restored == curve
    assert all(isinstance(p.x, float) for p in restored.points)


def test_round_trip_fraction():
    """Fraction: значения и тип сохраняются."""
    curve = Curve([(0, Fraction(0)), (Fraction(1, 3), Fraction(1, 7)), (2, Fraction(1))])

    restored = loads_curve(dumps_curve(curve))

    assert restored == curve
    assert restored.x_family == NumberFamily.RATIONAL
    assert isinstance(restored.points[1].x, Fraction)
    assert isinstance(restored.points[1].y, Fraction)


def test_round_trip_decimal_preserves_exponent():
    """Decimal: строковое представление (включая нули) сохраняется."""
    curve = Curve([(0, Decimal("0.00")), (1, Decimal("0.50")), (2, Decimal("1.00"))])

    restored = loads_curve(dumps_curve(curve))

    assert restored == curve
    assert str(restored.points[1].y) == "0.50"
    assert restored.y_family == NumberFamily.DECIMAL


def test_round_trip_single_point():
    """Кривая из одной точки."""
    curve = Curve([(7, 1)])

    assert loads_curve(dumps_curve(curve)) == curve


def test_round_trip_mixed_float_axis():
    """Ось float с int и Fraction вперемешку: значения и типы сохраняются."""
    curve = Curve([(0, 0), (Fraction(1, 2), 0.5), (1.0, 1)])

    restored = loads_curve(dumps_curve(curve))

    assert restored == curve
    assert restored.x_family == NumberFamily.FLOAT
    assert [type(p.x) for p in restored.points] == [int, Fraction, float]
    assert curve_to_document(curve)["points"][1] == ["1/2", 0.5]


def test_round_trip_whole_fraction_on_float_axis():
    """Целая Fraction на оси float остаётся Fraction ("2/1")."""
    curve = Curve([(0.5, 0.0), (Fraction(2), 1.0)])

    restored = loads_curve(dumps_curve(curve))

    assert isinstance(restored.points[1].x, Fraction)
    assert restored == curve


def test_curve_from_document(valid_document):
    """Документ → кривая с правильными типами."""
    curve = curve_from_document(valid_document)

    assert curve.x_values == (0.0, 2.5, 10.0)
    assert curve.y_values == (0, Fraction(1, 3), 1)
    assert curve.y_at_x(2.5) == Fraction(1, 3)


def test_string_on_float_axis_rejected(valid_document):
    """Строковые значения на оси float отвергает Pydantic модель."""
    valid_document["y_family"] = "float"

    with pytest.raises(pydantic.ValidationError):
        curve_from_document(valid_document)


def test_document_violating_curve_invariants(valid_document):
    """Документ проходит схему, но нарушает инварианты кривой."""
    valid_document["points"] = [[1.0, "0"], [1.0, "1/2"]]

    with pytest.raises(InvalidCurve, match="strictly increasing"):
        curve_from_document(valid_document)


def test_schema_checked_before_model(valid_document):
    """Нарушение схемы обнаруживается до создания модели."""
    valid_document["points"] = []

    with pytest.raises(ValidationError):
        curve_from_document(valid_document)


# =============================================================================
# PYDANTIC MODEL INTEGRATION
# =============================================================================


def test_curve_document_model_generates_valid_json():
    """CurveDocument.model_dump() проходит JSON Schema."""
    curve = Curve([(Decimal("0"), 0), (Decimal("1.5"), Fraction(1, 2)), (Decimal("3"), 1)])
    document = CurveDocument.from_curve(curve)

    data = document.model_dump(mode="json")

    validate_curve_document(data)
    assert document.to_curve() == curve


def test_curve_document_is_frozen():
    """CurveDocument неизменяем."""
    document = CurveDocument.from_curve(Curve([(0, 0), (1, 1)]))

    with pytest.raises(pydantic.ValidationError):
        document.x_family = NumberFamily.FLOAT
