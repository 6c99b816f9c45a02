from unittest.mock import MagicMock

import pytest

from sporthub import settings
from sporthub.data_handler import SheetsClient


@pytest.fixture
def sales_rows():
    """Master sales sheet: month header on row 4, channel rows from row 5."""
    return [
        [],
        ["", "Planilla Maestra SportHub"],
        [],
        ["", "Canal", "Enero", "Febrero", "Total"],
        ["", "Magic Marine Ecommerce", "1.500,00", "2.300,50"],
        ["", "brabo boomerang", "$ 1,000.00", "500"],
        ["", "Subtotal", "9.999,00", "9.999,00"],
        [],
        ["", "Princess Ecommerce", "200,00", ""],
    ]


@pytest.fixture
def mm_rows():
    """`Data MM` sheet: two header rows, column names on row 3, data from row 4."""
    return [
        [],
        ["", "", "", "", "", "", "Stock Actual"],
        ["", "Item Code", "Item Description", "Size", "", "Qty Importada",
         "TodoSailing", "Deposito", "Tata Barcos", "Aeromarine",
         "Costo unitario", "Cto en stock", "Precio en USA", "Total Ventas"],
        ["", "MM-001", "Wetsuit Ultimate", "M", "Black", "20",
         "2", "0", "0", "1", "USD 50,00", "150,00", "$120.00", "2.400,00"],
        ["", "MM-002", "Rash Vest", "L", "", "10",
         "4", "3", "2", "1", "25", "250", "60", "0"],
        ["", "", "", "XL", "Red", "5", "9", "9", "9", "9"],
        ["", "Item Code", "Item Description", "Size"],
    ]


@pytest.fixture
def hockey_rows():
    """`Data Hockey` sheet: Brabo and Princess products share the columns."""
    return [
        [],
        ["", "", "", "", "", "Stock Actual"],
        ["", "Item Code", "Item Description", "Size", "Qty Importada",
         "Boomerang", "Casa", "Sofia/Lucia", "Costo unitario", "Cto unit USD",
         "Cto en stock", "Precio Mayorista", "Precio ", "Venta Total "],
        ["", "BR-100", "Brabo Stick TC 90", "36.5", "12",
         "5", "2", "1", "$ 45.000,00", "45,00", "360.000,00", "70.000,00",
         "95.000,00", "1.900.000,00"],
        ["", "PR-200", "Hockey Skirt", "S", "8",
         "1", "0", "1", "20.000,00", "20,00", "40.000,00", "",
         "35.000,00", "350.000,00"],
        ["", "GL-300", "Princess Glove", "M", "6",
         "0", "0", "0", "10.000,00", "10,00", "0", "15.000,00",
         "20.000,00", "0"],
    ]


@pytest.fixture
def stock_sheets(mm_rows, hockey_rows):
    return {
        settings.STOCK_MM_SHEET: mm_rows,
        settings.STOCK_HOCKEY_SHEET: hockey_rows,
    }


@pytest.fixture
def fake_client():
    """A SheetsClient double whose fetch methods are plain mocks."""
    return MagicMock(spec=SheetsClient)
