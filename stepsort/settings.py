# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================

WINDOW_WIDTH   = 1100
WINDOW_HEIGHT  = 680
FPS            = 120

# Bar values are drawn uniformly from [VALUE_MIN, VALUE_MAX]
VALUE_MIN = 5
VALUE_MAX = 100

SIZE_MIN     = 5
SIZE_MAX     = 120
SIZE_DEFAULT = 40

DELAY_MIN     = 0
DELAY_MAX     = 200
DELAY_DEFAULT = 20

# With a zero delay the scheduler may run several steps per rendered frame
MAX_STEPS_PER_FRAME = 64

DEFAULT_ALGORITHM = "merge"

BACKGROUND_COLOR = (5, 5, 10)
ACTIVE_COLOR     = (255, 60, 60)
DONE_COLOR       = (60, 200, 100)
BAR_COLOR        = (90, 140, 230)
BAR_SPACING      = 1

# ============================================================
# ========================= UI THEME =========================
# ============================================================

UI_BG         = (8,   8,  14)
UI_PANEL      = (14, 14,  22)
UI_PANEL2     = (22, 22,  36)
UI_ACCENT     = (255, 55,  55)
UI_TEXT       = (215, 215, 228)
UI_SUBTEXT    = (105, 105, 130)
UI_HOVER      = (30,  22,  38)
UI_SEL_BG     = (50,  12,  12)
UI_BORDER     = (38,  38,  58)
UI_SEL_BORDER = (255, 55,  55)
UI_DIM        = (60,  60,  80)
UI_GREEN      = (60, 200, 100)

# ============================================================
# ========================= LAYOUT CONSTANTS =================
# ============================================================

PAD       = 16
PANEL_W   = 260
CHART_X   = PAD
CHART_Y   = 80
CHART_W   = WINDOW_WIDTH - PANEL_W - 3 * PAD
CHART_H   = WINDOW_HEIGHT - CHART_Y - 70
RX        = CHART_X + CHART_W + PAD + 10
RW        = PANEL_W - 20

_Y_SETTINGS = 88
_Y_SIZE     = 108
_Y_SPEED    = 162
_Y_ALGO     = 226
_Y_BUTTONS  = 380
