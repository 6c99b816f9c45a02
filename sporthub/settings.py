import os
from pathlib import Path
from dotenv import load_dotenv

from .schemas import (
    BrandInference,
    BrandRule,
    ChannelDefinition,
    SalesLayout,
    SheetLayout,
)

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Google Sheets API ---
SHEETS_API_BASE = os.getenv(
    "SHEETS_API_BASE", "https://sheets.googleapis.com/v4/spreadsheets"
)
SHEETS_SPREADSHEET_ID = os.getenv("SHEETS_SPREADSHEET_ID", "")
SHEETS_API_KEY = os.getenv("SHEETS_API_KEY", "")
SHEETS_TIMEOUT = float(os.getenv("SHEETS_TIMEOUT", "15"))

# --- Sheet Names ---
SALES_SHEET = os.getenv("SALES_SHEET", "Planilla Maestra SH")
STOCK_MM_SHEET = os.getenv("STOCK_MM_SHEET", "Data MM")
STOCK_HOCKEY_SHEET = os.getenv("STOCK_HOCKEY_SHEET", "Data Hockey")

# --- Report Tuning ---
LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))
LOW_STOCK_LIMIT = int(os.getenv("LOW_STOCK_LIMIT", "30"))
TOP_SELLERS_LIMIT = int(os.getenv("TOP_SELLERS_LIMIT", "10"))

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Shared Business Logic ---
# The compiled-in channel registry. Sales rows are matched to it by name.
SALES_CHANNELS = [
    ChannelDefinition(id="magic-marine-ecommerce", name="Magic Marine Ecommerce", brand="Magic Marine", color="#3B82F6"),
    ChannelDefinition(id="magic-marine-tata", name="Magic Marine Tata Barcos", brand="Magic Marine", color="#60A5FA"),
    ChannelDefinition(id="magic-marine-aeromarine", name="Magic Marine Aeromarine", brand="Magic Marine", color="#93C5FD"),
    ChannelDefinition(id="magic-marine-todosailing", name="Magic Marine Todosailing", brand="Magic Marine", color="#BFDBFE"),
    ChannelDefinition(id="brabo-boomerang", name="Brabo Boomerang", brand="Brabo", color="#F59E0B"),
    ChannelDefinition(id="brabo-ecommerce", name="Brabo Ecommerce", brand="Brabo", color="#FBBF24"),
    ChannelDefinition(id="brabo-extra", name="Brabo Extra", brand="Brabo", color="#FCD34D"),
    ChannelDefinition(id="princess-ecommerce", name="Princess Ecommerce", brand="Princess", color="#EC4899"),
    ChannelDefinition(id="princess-extra", name="Princess Extra", brand="Princess", color="#F472B6"),
]

BRAND_COLORS = {
    "Magic Marine": "#3B82F6",
    "Brabo": "#F59E0B",
    "Princess": "#EC4899",
}
DEFAULT_BRAND_COLOR = "#6B7280"

# Month names as they appear in the sales sheet header row.
MONTHS = [
    "Enero",
    "Febrero",
    "Marzo",
    "Abril",
    "Mayo",
    "Junio",
    "Julio",
    "Agosto",
    "Septiembre",
    "Octubre",
    "Noviembre",
    "Diciembre",
]

# --- Sheet Layouts ---
# Row 4 (index 3) holds the month names from column C onwards,
# channel rows follow in rows 5-13.
SALES_LAYOUT = SalesLayout(sheet_name=SALES_SHEET)

# Row 3 header: Item Code | Item Description | Size | Color | Qty Importada |
# TodoSailing | Deposito | Tata Barcos | Aeromarine | Costo unitario |
# Cto en stock | Precio en USA | Total Ventas. Costs are already in USD.
STOCK_MM_LAYOUT = SheetLayout(
    sheet_name=STOCK_MM_SHEET,
    id_prefix="mm",
    columns={
        "item_code": 1,
        "description": 2,
        "size": 3,
        "color": 4,
        "qty_imported": 5,
        "unit_cost": 10,
        "unit_cost_usd": 10,
        "stock_value": 11,
        "price": 12,
        "total_sales": 13,
    },
    location_columns={
        "TodoSailing": 6,
        "Deposito": 7,
        "Tata Barcos": 8,
        "Aeromarine": 9,
    },
    brand="Magic Marine",
)

# Row 3 header: Item Code | Item Description | Size | Qty Importada |
# Boomerang | Casa | Sofia/Lucia | Costo unitario (ARS) | Cto unit USD |
# Cto en stock | Precio Mayorista | Precio | Venta Total.
# Brabo and Princess share this sheet, so the brand is inferred per row.
STOCK_HOCKEY_LAYOUT = SheetLayout(
    sheet_name=STOCK_HOCKEY_SHEET,
    id_prefix="hockey",
    columns={
        "item_code": 1,
        "description": 2,
        "size": 3,
        "qty_imported": 4,
        "unit_cost": 8,
        "unit_cost_usd": 9,
        "stock_value": 10,
        "wholesale_price": 11,
        "price": 12,
        "total_sales": 13,
    },
    location_columns={
        "Boomerang": 5,
        "Casa": 6,
        "Sofia/Lucia": 7,
    },
    brand_inference=BrandInference(
        default_brand="Brabo",
        rules=(
            BrandRule(
                brand="Princess",
                description_contains=("princess",),
                code_prefixes=("pr",),
                code_contains=("princess",),
            ),
        ),
    ),
)

STOCK_LAYOUTS = [STOCK_MM_LAYOUT, STOCK_HOCKEY_LAYOUT]
