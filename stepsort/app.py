import argparse
import logging
import math
import sys

import pygame

from . import settings as S
from .algorithms import ALGORITHMS, Algorithm
from .run import Driver

logger = logging.getLogger(__name__)

# ============================================================
# ======================= COLOR / DRAW =======================
# ============================================================

def bar_color(i, snap):
    if i in snap.active: return S.ACTIVE_COLOR
    if i in snap.done:   return S.DONE_COLOR
    return S.BAR_COLOR


def bar_height(value, max_value, chart_h):
    # Never fully flat, so tiny values stay visible
    return max(2, round(value / max_value * chart_h))


def format_elapsed(seconds):
    """mm:ss.t"""
    tenths = int(seconds * 10)
    m, rem = divmod(tenths, 600)
    return f"{m:02d}:{rem // 10:02d}.{rem % 10}"


def draw_bars(s, snap):
    chart = pygame.Rect(S.CHART_X, S.CHART_Y, S.CHART_W, S.CHART_H)
    pygame.draw.rect(s, S.BACKGROUND_COLOR, chart)
    n = len(snap.array)
    if not n:
        return
    bw = S.CHART_W / n
    top = max(max(snap.array), S.VALUE_MAX)
    for i, v in enumerate(snap.array):
        h = bar_height(v, top, S.CHART_H)
        pygame.draw.rect(s, bar_color(i, snap),
                         (S.CHART_X + i * bw, S.CHART_Y + S.CHART_H - h,
                          max(1, bw - S.BAR_SPACING), h))


def draw_progress(s, fonts, snap, now_ms):
    y = S.CHART_Y + S.CHART_H + 16
    track = pygame.Rect(S.CHART_X, y, S.CHART_W, 10)
    pygame.draw.rect(s, S.UI_BORDER, track, border_radius=3)

    if snap.indeterminate and snap.busy:
        # Sliding stripe: running, unknown ETA
        sw = S.CHART_W // 6
        x = (now_ms // 4) % (S.CHART_W + sw) - sw
        stripe = pygame.Rect(S.CHART_X + x, y, sw, 10).clip(track)
        pygame.draw.rect(s, S.UI_ACCENT, stripe, border_radius=3)
        label = "running - unknown ETA"
    elif snap.percent is not None:
        fw = int(S.CHART_W * snap.percent / 100.0)
        if fw > 0:
            pygame.draw.rect(s, S.UI_ACCENT, (S.CHART_X, y, fw, 10), border_radius=3)
        label = f"{snap.percent:5.1f}%"
    else:
        label = ""

    info = f"{label}   {format_elapsed(snap.elapsed)}   [{snap.status}]"
    s.blit(fonts['mono_sm'].render(info, True, S.UI_SUBTEXT), (S.CHART_X, y + 18))

# ============================================================
# ========================= UI WIDGETS =======================
# ============================================================

class Slider:
    """Single-knob integer slider."""
    KNOB_RADIUS = 6

    def __init__(self, x, y, w, lo, hi, val, label, unit=""):
        self.x, self.y, self.w = x, y, w
        self.lo, self.hi = lo, hi
        self.value = val
        self.label = label
        self.unit = unit
        self.drag = False
        self.enabled = True
        self.track = pygame.Rect(x, y+18, w, 4)
        self.hit = pygame.Rect(x-5, y, w+10, 38)

    def _r(self):
        return (self.value - self.lo) / (self.hi - self.lo)

    def _kx(self):
        return int(self.x + self._r() * self.w)

    def handle(self, ev):
        """Returns True when the value changed."""
        if not self.enabled:
            self.drag = False
            return False
        old = self.value
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if math.hypot(ev.pos[0]-self._kx(), ev.pos[1]-self.track.centery) < 14 \
               or self.hit.collidepoint(ev.pos):
                self.drag = True; self._set(ev.pos[0])
        elif ev.type == pygame.MOUSEBUTTONUP:
            self.drag = False
        elif ev.type == pygame.MOUSEMOTION and self.drag:
            self._set(ev.pos[0])
        return self.value != old

    def _set(self, mx):
        r = max(0.0, min(1.0, (mx - self.x) / self.w))
        self.value = int(round(self.lo + r * (self.hi - self.lo)))

    def draw(self, s, fonts):
        accent = S.UI_ACCENT if self.enabled else S.UI_DIM
        s.blit(fonts['small'].render(f"{self.label}:  {self.value}{self.unit}", True, S.UI_SUBTEXT),
               (self.x, self.y))
        pygame.draw.rect(s, S.UI_BORDER, self.track, border_radius=2)
        fw = int(self._r() * self.w)
        if fw > 0: pygame.draw.rect(s, accent, (self.x, self.track.y, fw, 4), border_radius=2)
        kx, ky = self._kx(), self.track.centery
        pygame.draw.circle(s, S.UI_PANEL2, (kx, ky), self.KNOB_RADIUS)
        pygame.draw.circle(s, accent, (kx, ky), self.KNOB_RADIUS, 2)
        pygame.draw.circle(s, accent, (kx, ky), 2)


class AlgoBtn:
    H = 38
    def __init__(self, x, y, w, name, algorithm, idx):
        self.rect = pygame.Rect(x, y, w, self.H)
        self.name, self.algorithm, self.idx = name, algorithm, idx

    def draw(self, s, fonts, sel, hov, enabled=True):
        bg = S.UI_SEL_BG if sel else (S.UI_HOVER if hov and enabled else S.UI_PANEL)
        br = S.UI_SEL_BORDER if sel else (S.UI_DIM if hov and enabled else S.UI_BORDER)
        pygame.draw.rect(s, bg, self.rect, border_radius=5)
        pygame.draw.rect(s, br, self.rect, 1, border_radius=5)
        nc = S.UI_ACCENT if sel else S.UI_SUBTEXT
        tc = S.UI_TEXT if sel or (hov and enabled) else (150, 150, 170)
        s.blit(fonts['mono_sm'].render(f"{self.idx+1:02d}", True, nc),
               (self.rect.x+10, self.rect.y+12))
        s.blit(fonts['mid'].render(self.name, True, tc), (self.rect.x+40, self.rect.y+10))


class SmBtn:
    def __init__(self, x, y, w, h, lbl):
        self.rect = pygame.Rect(x, y, w, h); self.label = lbl
    def draw(self, s, fonts, act=False, hov=False, enabled=True):
        bg = S.UI_ACCENT if act else (S.UI_HOVER if hov and enabled else S.UI_PANEL2)
        fc = (0, 0, 0) if act else (S.UI_TEXT if enabled else S.UI_DIM)
        pygame.draw.rect(s, bg,          self.rect, border_radius=5)
        pygame.draw.rect(s, S.UI_BORDER, self.rect, 1, border_radius=5)
        t = fonts['small'].render(self.label, True, fc)
        s.blit(t, t.get_rect(center=self.rect.center))

# ============================================================
# ======================= CONTROL PANEL ======================
# ============================================================

class Panel:
    def __init__(self, screen, fonts, driver):
        self.screen = screen
        self.fonts  = fonts
        self.driver = driver
        self.hov    = -1

        self.sl_size  = Slider(S.RX, S._Y_SIZE,  S.RW, S.SIZE_MIN,  S.SIZE_MAX,
                               driver.size, "Array Size")
        self.sl_delay = Slider(S.RX, S._Y_SPEED, S.RW, S.DELAY_MIN, S.DELAY_MAX,
                               driver.delay_ms, "Delay", unit=" ms")

        self.btns = [AlgoBtn(S.RX, S._Y_ALGO + 16 + i*(AlgoBtn.H+5), S.RW, nm, algo, i)
                     for i, (nm, algo) in enumerate(ALGORITHMS)]

        bw = (S.RW - 10) // 3
        y = S._Y_BUTTONS
        self.rand_btn  = SmBtn(S.RX,              y, bw, 34, "Randomize")
        self.start_btn = SmBtn(S.RX + bw + 5,     y, bw, 34, "> Start")
        self.stop_btn  = SmBtn(S.RX + 2*(bw + 5), y, bw, 34, "Stop")

    def handle(self, ev):
        d = self.driver
        busy = d.busy
        self.sl_size.enabled = not busy

        if self.sl_size.handle(ev):
            d.resize(self.sl_size.value)
        if self.sl_delay.handle(ev):
            d.set_delay(self.sl_delay.value)

        if ev.type == pygame.MOUSEMOTION:
            self.hov = -1
            for b in self.btns:
                if b.rect.collidepoint(ev.pos): self.hov = b.idx

        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for b in self.btns:
                if b.rect.collidepoint(ev.pos): d.set_algorithm(b.algorithm)
            if self.rand_btn.rect.collidepoint(ev.pos):  d.randomize()
            if self.start_btn.rect.collidepoint(ev.pos): d.start()
            if self.stop_btn.rect.collidepoint(ev.pos):  d.stop()

        if ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_SPACE:
                if busy: d.stop()
                else:    d.start()
            elif ev.key == pygame.K_r:
                d.randomize()

    def draw(self, snap, now_ms):
        s  = self.screen
        d  = self.driver
        mp = pygame.mouse.get_pos()
        busy = snap.busy
        self.sl_size.enabled = not busy
        s.fill(S.UI_BG)

        t1 = self.fonts['title'].render("StepSort", True, S.UI_TEXT)
        t2 = self.fonts['title'].render("StepSort", True, S.UI_ACCENT)
        s.blit(t2, (S.PAD+1, 23)); s.blit(t1, (S.PAD, 22))
        s.blit(self.fonts['small'].render(f"{len(snap.array)} bars", True, S.UI_SUBTEXT),
               (S.PAD + t1.get_width() + 12, 31))
        pygame.draw.line(s, S.UI_BORDER, (S.PAD, 68), (S.WINDOW_WIDTH-S.PAD, 68), 1)

        draw_bars(s, snap)
        draw_progress(s, self.fonts, snap, now_ms)

        panel = pygame.Rect(S.RX-10, 76, S.RW+20, S.WINDOW_HEIGHT-82)
        pygame.draw.rect(s, S.UI_PANEL,  panel, border_radius=7)
        pygame.draw.rect(s, S.UI_BORDER, panel, 1, border_radius=7)
        s.blit(self.fonts['small'].render("SETTINGS", True, S.UI_SUBTEXT), (S.RX, S._Y_SETTINGS))

        self.sl_size.draw(s, self.fonts)
        self.sl_delay.draw(s, self.fonts)

        s.blit(self.fonts['small'].render("Algorithm", True, S.UI_SUBTEXT), (S.RX, S._Y_ALGO))
        for b in self.btns:
            b.draw(s, self.fonts, b.algorithm is d.algorithm, b.idx == self.hov, not busy)

        self.rand_btn.draw(s, self.fonts, False, self.rand_btn.rect.collidepoint(mp), not busy)
        self.start_btn.draw(s, self.fonts, False, self.start_btn.rect.collidepoint(mp), not busy)
        self.stop_btn.draw(s, self.fonts, busy, self.stop_btn.rect.collidepoint(mp), busy)

        s.blit(self.fonts['small'].render("SPACE start/stop   R randomize   ESC quit", True, S.UI_DIM),
               (S.RX, S._Y_BUTTONS + 48))

        pygame.display.flip()

# ============================================================
# ========================= MAIN =============================
# ============================================================

def build_fonts():
    # SysFont takes a comma-separated fallback list
    mono = "consolas,couriernew,lucidaconsole"
    sans = "segoeui,tahoma,arial"
    return dict(title=pygame.font.SysFont(mono, 26), mid=pygame.font.SysFont(sans, 17),
                small=pygame.font.SysFont(sans, 13), mono_sm=pygame.font.SysFont(mono, 12))


def advance(driver, last_step_ms, now_ms):
    """
    Run every step whose slot has come due since last_step_ms, at most
    MAX_STEPS_PER_FRAME of them. Returns the new last_step_ms.

    Slots are laid out delay_ms apart, so time left over after a frame
    carries into the next one instead of being dropped.
    """
    if not driver.busy:
        return now_ms
    if driver.delay_ms == 0:
        for _ in range(S.MAX_STEPS_PER_FRAME):
            if not driver.step():
                break
        return now_ms
    for _ in range(S.MAX_STEPS_PER_FRAME):
        if now_ms - last_step_ms < driver.delay_ms:
            return last_step_ms
        last_step_ms += driver.delay_ms
        if not driver.step():
            return now_ms
    # Too far behind to catch up in one frame; drop the backlog
    if now_ms - last_step_ms >= driver.delay_ms:
        return now_ms
    return last_step_ms


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="stepsort",
                                description="Animated merge, bubble and bogo sort.")
    p.add_argument("--size", type=int, default=S.SIZE_DEFAULT,
                   help=f"number of bars ({S.SIZE_MIN}-{S.SIZE_MAX})")
    p.add_argument("--delay", type=int, default=S.DELAY_DEFAULT,
                   help=f"milliseconds per step ({S.DELAY_MIN}-{S.DELAY_MAX})")
    p.add_argument("--algo", choices=[a.value for a in Algorithm], default=S.DEFAULT_ALGORITHM)
    p.add_argument("--seed", type=int, default=None, help="seed for array generation and shuffles")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s: %(message)s")
    try:
        driver = Driver(args.size, args.delay, args.algo, seed=args.seed)
    except ValueError as e:
        logger.error("%s", e)
        return 2

    pygame.init()
    screen = pygame.display.set_mode((S.WINDOW_WIDTH, S.WINDOW_HEIGHT))
    pygame.display.set_caption("StepSort")
    fonts = build_fonts(); clock = pygame.time.Clock()
    panel = Panel(screen, fonts, driver)

    last_step = pygame.time.get_ticks()
    while True:
        clock.tick(S.FPS)
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT or (ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE):
                driver.stop()
                pygame.quit()
                return 0
            was_busy = driver.busy
            panel.handle(ev)
            if driver.busy and not was_busy:
                last_step = pygame.time.get_ticks()
        now = pygame.time.get_ticks()
        last_step = advance(driver, last_step, now)
        panel.draw(driver.snapshot(), now)


if __name__ == "__main__":
    sys.exit(main())
