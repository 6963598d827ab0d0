"""Application-wide constants."""

APP_NAME = "LayerDesk"
APP_VERSION = "0.1.0"
ORG_NAME = "LayerDesk"
ORG_DOMAIN = "layerdesk.org"

# Layer management window
LAYER_MANAGEMENT_TITLE = "Layer Management"
LAYER_MANAGEMENT_X_DEFAULT = 20
LAYER_MANAGEMENT_Y_DEFAULT = 20
LAYER_MANAGEMENT_WIDTH_DEFAULT = 640
LAYER_MANAGEMENT_HEIGHT_DEFAULT = 300

# Default layer
DEFAULT_LAYER_NAME = "Layer 0"
DEFAULT_LAYER_COLOR = "#000000"

# Layer table layout
COLUMN_LAYER_NAME = 0
COLUMN_LAYER_COLOR = 1
COLUMN_LAYER_VISIBLE = 2
COLUMN_LAYER_LOCKED = 3
COLUMN_LAYER_ACTIVE = 4
LAYER_TABLE_HEADERS = ["Name", "Color", "Visible", "Locked", "Active"]
ROW_DEFAULT_LAYER = 0

# Background
DEFAULT_BACKGROUND_COLOR = "White"

# Delete confirmation
DELETE_LAYERS_TITLE = "Delete Layers"
DELETE_LAYERS_MESSAGE = (
    "Delete the selected layer(s)?\n\n"
    "The default layer is never deleted. This action cannot be undone."
)
