import pytest

from dsmanalysis.model import MatrixParseError
from dsmanalysis.model.io import MatrixIO, matrix_from_dict, matrix_to_dict


def test_round_trip(chain_matrix):
    chain_matrix.set_title("Pump system")
    chain_matrix.set_customer("ACME")
    a = chain_matrix.rows[0]
    chain_matrix.add_grouping("Hydraulics", (0.2, 0.4, 0.6))
    chain_matrix.set_item_group_symmetric(a, "Hydraulics")

    data = matrix_to_dict(chain_matrix)
    loaded = matrix_from_dict(data)

    assert MatrixIO.to_dict(loaded) == data
    assert loaded.symmetric
    assert loaded.title == "Pump system"
    assert loaded.groupings.get("Hydraulics").color == (0.2, 0.4, 0.6)


def test_loaded_matrix_is_clean(chain_matrix):
    loaded = matrix_from_dict(matrix_to_dict(chain_matrix))
    assert len(loaded.history) == 0
    assert not loaded.modified


def test_loaded_uids_are_reserved(chain_matrix):
    loaded = matrix_from_dict(matrix_to_dict(chain_matrix))
    highest = max(item.uid for item in loaded.items)
    row, col = loaded.add_symmetric_item("D")
    assert row.uid > highest and col.uid > highest


def test_not_a_mapping():
    with pytest.raises(MatrixParseError):
        matrix_from_dict(["rows"])


def test_missing_section(chain_matrix):
    data = matrix_to_dict(chain_matrix)
    del data["rows"]
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)


def test_connection_to_unknown_item(chain_matrix):
    data = matrix_to_dict(chain_matrix)
    data["connections"].append({"row_uid": 999, "col_uid": 1000, "name": "", "weight": 1.0})
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)


def test_broken_symmetry(chain_matrix):
    data = matrix_to_dict(chain_matrix)
    data["cols"][0]["alias_uid"] = None
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)


def test_duplicate_uid(chain_matrix):
    data = matrix_to_dict(chain_matrix)
    data["cols"][0]["uid"] = data["rows"][0]["uid"]
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)


def test_parse_error_is_value_error():
    assert issubclass(MatrixParseError, ValueError)


@pytest.mark.parametrize("section, broken", [
    ("metadata", ["title"]),
    ("groupings", [["Hydraulics", [0.1, 0.2, 0.3]]]),
    ("rows", [[1, "A", 1.0]]),
    ("connections", [[1, 2]]),
])
def test_entries_that_are_not_mappings(chain_matrix, section, broken):
    data = matrix_to_dict(chain_matrix)
    data[section] = broken
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)


def test_connection_from_column_to_row(chain_matrix):
    data = matrix_to_dict(chain_matrix)
    data["connections"].append({
        "row_uid": data["cols"][0]["uid"],
        "col_uid": data["rows"][1]["uid"],
        "name": "",
        "weight": 1.0,
    })
    with pytest.raises(MatrixParseError):
        matrix_from_dict(data)
