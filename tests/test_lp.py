"""
Tests for the linear predictor reader (lvmred.lp.lp).

These tests verify:
    - Default and sentinel field requests
    - Derived link/endo values
    - Output formats
    - Selector resolution and its errors
    - The model is never mutated
"""

import pytest
import yaml

from lvmred.lp import lp, main, resolve_selector, InvalidArgumentError, LPField, LPFormat
from lvmred.model import LinearPredictorEntry, ReducedLVM
from lvmred.options import set_lava_options, reset_lava_options
from lvmred.serialization import model_to_yaml


@pytest.fixture
def single():
    """y ~ x1 + x2"""
    return ReducedLVM(lp={
        "y": LinearPredictorEntry(con=["a", "b"], name=["n1", "n2"], x=["x1", "x2"]),
    })


@pytest.fixture
def two():
    """y1 ~ x1 + x2, y2 ~ x3"""
    return ReducedLVM(lp={
        "y1": LinearPredictorEntry(con=["a", "b"], name=["n1", "n2"], x=["x1", "x2"]),
        "y2": LinearPredictorEntry(con=["c"], name=["n3"], x=["x3"]),
    })


@pytest.fixture
def restore_options():
    yield
    reset_lava_options()


class TestFieldSentinels:
    """Test None, "endogeneous" and "n.link" requests."""

    def test_default_returns_names(self, two):
        """Default request is the flat list of predictor names."""
        assert lp(two) == ["n1", "n2", "n3"]

    def test_absent_fields_nested_con_name_x(self, two):
        """fields=None gives con, name and x for every entry."""
        result = lp(two, fields=None)
        assert list(result) == ["y1", "y2"]
        assert result["y1"] == {"con": ["a", "b"], "name": ["n1", "n2"], "x": ["x1", "x2"]}
        assert list(result["y2"]) == ["con", "name", "x"]
        assert "link" not in result["y1"]
        assert "endo" not in result["y1"]

    def test_empty_sequence_same_as_none(self, two):
        """An empty field list is the absent request too."""
        assert lp(two, fields=[]) == lp(two, fields=None)
        assert lp(two, fields=(), format="vector") == lp(two, fields=None)

    def test_sentinels_as_one_element_sequences(self, two):
        """Tuples and lists holding a single sentinel behave like the string."""
        assert lp(two, fields=("endogeneous",)) == ["y1", "y2"]
        assert lp(two, fields=["n.link"]) == {"y1": 2, "y2": 1}
        assert lp(two, fields=("n.link",)) == {"y1": 2, "y2": 1}

    def test_absent_fields_overrides_format(self, single):
        """fields=None forces the nested format."""
        assert lp(single, fields=None, format="vector") == lp(single, fields=None, format="nested")

    def test_endogeneous_returns_keys(self, two):
        """Should return the map keys in order."""
        assert lp(two, fields="endogeneous") == ["y1", "y2"]

    def test_endogeneous_ignores_other_arguments(self, two):
        """Selector and format are not even validated."""
        assert lp(two, fields="endogeneous", selector=999, format="bogus") == ["y1", "y2"]

    def test_n_link_counts(self, two):
        """One count per entry, labelled by key."""
        assert lp(two, fields="n.link") == {"y1": 2, "y2": 1}

    def test_n_link_with_selector(self, two):
        assert lp(two, fields="n.link", selector="y2") == {"y2": 1}

    def test_n_link_zero_without_covariates(self):
        model = ReducedLVM(lp={"y": LinearPredictorEntry()})
        assert lp(model, fields="n.link") == {"y": 0}


class TestDerivedFields:
    """Test link and endo computation."""

    def test_link(self, single):
        """Links join the key and each covariate with the symbol."""
        assert lp(single, fields="link") == ["y~x1", "y~x2"]

    def test_link_per_entry(self, two):
        assert lp(two, fields="link", format="per-entry") == {
            "y1": ["y1~x1", "y1~x2"],
            "y2": ["y2~x3"],
        }

    def test_link_empty_without_covariates(self):
        """No covariates means no links."""
        model = ReducedLVM(lp={"y": LinearPredictorEntry(con=["a"], name=["n"])})
        assert lp(model, fields="link", format="per-entry") == {"y": []}
        assert lp(model, fields="link") == []

    def test_endo(self, two):
        assert lp(two, fields="endo") == ["y1", "y2"]
        assert lp(two, fields="endo", format="per-entry") == {"y1": "y1", "y2": "y2"}

    def test_link_uses_current_symbol(self, single, restore_options):
        """Changing the global symbol changes the links."""
        set_lava_options(symbol=("->", "<->"))
        assert lp(single, fields="link") == ["y->x1", "y->x2"]

    def test_model_not_mutated(self, single):
        """Reading links/endo leaves the stored entries untouched."""
        before = single.lp["y"].to_dict()
        lp(single, fields=["link", "endo"], format="nested")
        assert single.lp["y"].to_dict() == before
        assert not hasattr(single.lp["y"], "link")

    def test_returned_lists_are_copies(self, single):
        result = lp(single, fields="x", format="per-entry")
        result["y"].append("x99")
        assert single.lp["y"].x == ["x1", "x2"]


class TestFormats:
    """Test the vector, per-entry and nested formats."""

    def test_vector_flattens(self, two):
        assert lp(two, fields="x") == ["x1", "x2", "x3"]

    def test_per_entry(self, two):
        assert lp(two, fields="con", format="per-entry") == {"y1": ["a", "b"], "y2": ["c"]}

    def test_nested_keeps_request_order(self, single):
        result = lp(single, fields=["x", "link"], format="nested")
        assert list(result["y"]) == ["x", "link"]
        assert result["y"]["link"] == ["y~x1", "y~x2"]

    def test_nested_single_field(self, single):
        assert lp(single, fields="x", format="nested") == {"y": {"x": ["x1", "x2"]}}

    def test_list_aliases(self, two):
        """The historical "list" and "list2" names are accepted."""
        assert lp(two, fields="x", format="list") == lp(two, fields="x", format="per-entry")
        assert lp(two, fields="x", format="list2") == lp(two, fields="x", format="nested")

    def test_enum_arguments(self, two):
        assert lp(two, fields=LPField.X, format=LPFormat.PER_ENTRY) == {"y1": ["x1", "x2"], "y2": ["x3"]}
        assert lp(two, fields=[LPField.CON, "name"], format=LPFormat.NESTED)["y2"] == {
            "con": ["c"], "name": ["n3"],
        }


class TestEmptyModel:
    """Test reads on a model without linear predictors."""

    def test_empty_returns_none(self):
        assert lp(ReducedLVM()) is None

    def test_empty_short_circuits_validation(self):
        assert lp(ReducedLVM(), fields="bogus", selector=5) is None


class TestErrors:
    """Test argument validation."""

    def test_unknown_field(self, single):
        with pytest.raises(InvalidArgumentError, match='"bogus"'):
            lp(single, fields="bogus")

    def test_unknown_field_lists_valid_types(self, single):
        with pytest.raises(InvalidArgumentError, match='"link" "con" "name" "x" "endo"'):
            lp(single, fields=["x", "bogus"], format="nested")

    def test_unknown_format(self, single):
        with pytest.raises(InvalidArgumentError, match="table"):
            lp(single, fields="x", format="table")

    def test_vector_with_several_fields(self, single):
        with pytest.raises(InvalidArgumentError, match="number of types: 2"):
            lp(single, fields=["con", "name"], format="vector")

    def test_per_entry_with_several_fields(self, single):
        with pytest.raises(InvalidArgumentError):
            lp(single, fields=["con", "name"], format="per-entry")

    def test_position_out_of_range(self, two):
        with pytest.raises(InvalidArgumentError, match=r"999.*1\.\.2"):
            lp(two, fields="x", selector=999)

    def test_zero_position(self, two):
        """Positions are 1-based."""
        with pytest.raises(InvalidArgumentError, match="0"):
            lp(two, fields="x", selector=0)

    def test_unknown_name(self, two):
        with pytest.raises(InvalidArgumentError, match=r'"z".*"y1" "y2"'):
            lp(two, fields="x", selector=["y1", "z"])

    def test_mixed_selector(self, two):
        with pytest.raises(InvalidArgumentError, match="must be integer"):
            lp(two, fields="x", selector=[1, "y2"])

    def test_float_selector(self, two):
        with pytest.raises(InvalidArgumentError):
            lp(two, fields="x", selector=1.0)


class TestSelector:
    """Test selector resolution."""

    def test_none_selects_all(self):
        assert resolve_selector(["a", "b", "c"], None) == [0, 1, 2]

    def test_positions(self):
        assert resolve_selector(["a", "b", "c"], [3, 1]) == [2, 0]

    def test_names(self):
        assert resolve_selector(["a", "b", "c"], ["c", "a"]) == [2, 0]

    def test_duplicates_kept(self):
        assert resolve_selector(["a", "b"], [2, 2]) == [1, 1]

    def test_empty_selector(self):
        assert resolve_selector(["a", "b"], []) == []

    def test_bool_rejected(self):
        with pytest.raises(InvalidArgumentError):
            resolve_selector(["a", "b"], True)

    def test_empty_keys_range(self):
        with pytest.raises(InvalidArgumentError, match="empty"):
            resolve_selector([], 1)

    def test_selector_order_in_result(self, two):
        assert list(lp(two, fields="x", selector=[2, 1], format="per-entry")) == ["y2", "y1"]
        assert lp(two, fields="x", selector=["y2", "y1"]) == ["x3", "x1", "x2"]


class TestCommandLine:
    """Test the python -m lvmred.lp entry point."""

    @pytest.fixture
    def model_file(self, two, tmp_path):
        path = tmp_path / "model.yaml"
        path.write_text(model_to_yaml(two))
        return str(path)

    def test_n_link(self, model_file, capsys):
        main([model_file, "--fields", "n.link"])
        assert capsys.readouterr().out == "y1: 2\ny2: 1\n"

    def test_position_selector(self, model_file, capsys):
        """Numeric selector values are read as positions."""
        main([model_file, "--selector", "1"])
        assert capsys.readouterr().out == "- n1\n- n2\n"

    def test_name_selector(self, model_file, capsys):
        main([model_file, "--fields", "x", "--selector", "y2"])
        assert capsys.readouterr().out == "- x3\n"

    def test_fields_without_values(self, model_file, capsys):
        """--fields alone asks for con, name and x."""
        main([model_file, "--fields", "--selector", "y2"])
        assert yaml.safe_load(capsys.readouterr().out) == {
            "y2": {"con": ["c"], "name": ["n3"], "x": ["x3"]},
        }

    def test_several_fields_nested(self, model_file, capsys):
        main([model_file, "--fields", "x", "link", "--format", "nested", "--selector", "2"])
        assert yaml.safe_load(capsys.readouterr().out) == {
            "y2": {"x": ["x3"], "link": ["y2~x3"]},
        }

    def test_invalid_selector(self, model_file):
        with pytest.raises(InvalidArgumentError, match="999"):
            main([model_file, "--selector", "999"])
