# voxel_evo/ui/renderer.py
from __future__ import annotations
import colorsys, math, pygame
from collections import Counter

# ---------- Colors / Theme ----------
BG_COLOR     = (14,16,20)
GRID_COLOR   = (35,40,48)
PANEL_BG     = (10,12,16)
SELECT_COLOR = (250,250,250)
FOLLOW_COLOR = (240,200,60)

TOPBAR_BG    = (24,26,32)
TOPBAR_LINE  = (54,58,66)

FOOD_COLORS = {
    "plant":    (60, 200, 90),
    "fruit":    (230, 90, 120),
    "mushroom": (180, 140, 100),
    "meat":     (200, 60, 60),
    "mineral":  (150, 170, 200),
}

# ground tint per environment
ENV_COLORS = {
    "plains":    (22, 30, 22),
    "forest":    (14, 30, 18),
    "desert":    (40, 34, 20),
    "mountains": (30, 30, 34),
    "ocean":     (14, 22, 40),
    "predators": (36, 18, 18),
}

DIET_COLORS = {
    "carnivore": (220, 60, 60),
    "omnivore":  (60, 140, 240),
    "herbivore": (60, 200, 120),
}

# ---------- Layout knobs ----------
TOPBAR_HEIGHT    = 100
HUD_PAD_X        = 12
HUD_PAD_Y        = 10

PANEL_PADDING    = 12
TITLE_GAP        = 6
SECTION_GAP      = 10
PLOT_SIDE_PAD    = 36
PLOT_TOP_PAD     = 8
PLOT_BOTTOM_PAD  = 36

def _clamp01(x: float) -> float:
    return 0.0 if x < 0 else (1.0 if x > 1.0 else x)

def hue_color(hue: float, sat: float = 0.7, val: float = 0.9):
    r, g, b = colorsys.hsv_to_rgb((hue % 360) / 360.0, sat, val)
    return (int(r * 255), int(g * 255), int(b * 255))

class Renderer:
    def __init__(self, screen, world_rect: pygame.Rect, panel_rect: pygame.Rect, world_size: float, font_name="Menlo"):
        self.screen = screen
        self.world_size = world_size
        self.topbar_height = TOPBAR_HEIGHT
        self.font = pygame.font.SysFont(font_name, 14)
        self.bigfont = pygame.font.SysFont(font_name, 18, bold=True)
        self.resize(world_rect, panel_rect)

        self.panel_mode = "traits"  # "traits" | "phylo"
        self.show_legend = True

    def resize(self, world_rect: pygame.Rect, panel_rect: pygame.Rect):
        """Update layout rects after a window resize."""
        self.panel_rect_outer = panel_rect
        self.panel_content = self.panel_rect_outer.inflate(-2*PANEL_PADDING, -2*PANEL_PADDING)
        self.world_rect = pygame.Rect(
            world_rect.x,
            world_rect.y + self.topbar_height,
            world_rect.w,
            max(0, world_rect.h - self.topbar_height)
        )

    # ---------- coordinate helpers ----------
    def _scale(self) -> float:
        return min(self.world_rect.w, self.world_rect.h) / self.world_size

    def world_to_screen(self, x, y):
        s = self._scale()
        cx, cy = self.world_rect.center
        return int(cx + x * s), int(cy + y * s)

    def screen_to_world(self, sx, sy):
        s = self._scale()
        cx, cy = self.world_rect.center
        return (sx - cx) / s, (sy - cy) / s

    def pick(self, sim, sx, sy, radius_px: int = 12):
        """Creature under the cursor, or None."""
        best, best_d = None, radius_px
        for c in sim.creatures:
            px, py = self.world_to_screen(c.x, c.y)
            d = math.hypot(px - sx, py - sy)
            if d < best_d:
                best, best_d = c, d
        return best

    # ---------- top bar ----------
    def _draw_topbar(self):
        scr = self.screen.get_rect()
        bar = pygame.Rect(0, 0, scr.w, self.topbar_height)
        pygame.draw.rect(self.screen, TOPBAR_BG, bar)
        pygame.draw.line(self.screen, TOPBAR_LINE, (0, self.topbar_height), (scr.w, self.topbar_height), 1)

    # ---------- arena ----------
    def _arena_rect(self) -> pygame.Rect:
        h = self.world_size / 2
        x0, y0 = self.world_to_screen(-h, -h)
        x1, y1 = self.world_to_screen(h, h)
        return pygame.Rect(x0, y0, x1 - x0, y1 - y0)

    def _draw_grid(self, environment_type: str, spacing=5.0):
        arena = self._arena_rect()
        pygame.draw.rect(self.screen, ENV_COLORS.get(environment_type, GRID_COLOR), arena)
        h = self.world_size / 2
        k = -h
        while k <= h + 1e-9:
            sx, sy = self.world_to_screen(k, k)
            pygame.draw.line(self.screen, GRID_COLOR, (sx, arena.top), (sx, arena.bottom), 1)
            pygame.draw.line(self.screen, GRID_COLOR, (arena.left, sy), (arena.right, sy), 1)
            k += spacing
        pygame.draw.rect(self.screen, (70,75,85), arena, 2)

    def _draw_creature(self, c, selected: bool, followed: bool):
        """
        Body disc tinted by the colour gene, outer ring by diet,
        a short tick along the heading and an energy bar underneath.
        """
        sx, sy = self.world_to_screen(c.x, c.y)
        r = max(3, int(self._scale() * c.genes.size * 0.8))

        body = hue_color(c.genes.color, 0.3 + 0.6 * c.genes.pattern_intensity, 0.9)
        pygame.draw.circle(self.screen, body, (sx, sy), r)
        ring = max(1, r // 4)
        pygame.draw.circle(self.screen, DIET_COLORS.get(c.genes.diet_type, (180,180,180)), (sx, sy), r, ring)

        if c.genes.has_shell:
            pygame.draw.circle(self.screen, (200,200,210), (sx, sy), r + 2, 1)
        if c.genes.has_spikes:
            for i in range(6):
                a = i * math.pi / 3
                tip = (sx + math.cos(a) * (r + 4), sy + math.sin(a) * (r + 4))
                pygame.draw.line(self.screen, (230,230,230), (sx + math.cos(a) * r, sy + math.sin(a) * r), tip, 1)

        hx, hy = c.heading
        pygame.draw.line(self.screen, (240,240,240), (sx, sy), (int(sx + hx * r * 1.6), int(sy + hy * r * 1.6)), 1)

        # energy bar
        w = 2 * r
        frac = _clamp01(c.energy / 100.0)
        pygame.draw.rect(self.screen, (60,60,60), (sx - r, sy + r + 3, w, 3))
        pygame.draw.rect(self.screen, (90,220,120) if frac > 0.3 else (220,80,80), (sx - r, sy + r + 3, int(w * frac), 3))

        if followed:
            pygame.draw.circle(self.screen, FOLLOW_COLOR, (sx, sy), r + 6, 2)
        elif selected:
            pygame.draw.circle(self.screen, SELECT_COLOR, (sx, sy), r + 5, 1)

    def _draw_legend(self):
        pad = 8
        w, h = 210, 140
        lx = self.world_rect.x + pad
        ly = self.world_rect.bottom - h - pad

        rect = pygame.Rect(lx, ly, w, h)
        pygame.draw.rect(self.screen, (18,20,24), rect)
        pygame.draw.rect(self.screen, (80,85,95), rect, 1)

        y = ly + 6
        self.screen.blit(self.bigfont.render("Legend", True, (230,230,235)), (lx+6, y))
        y += 22
        for name, col in FOOD_COLORS.items():
            pygame.draw.rect(self.screen, col, (lx + 8, y + 3, 10, 10))
            self.screen.blit(self.font.render(f"{name} food", True, (210,210,220)), (lx+26, y))
            y += 16
        self.screen.blit(self.font.render("ring = diet, fill = colour gene", True, (210,210,220)), (lx+8, y))

    def draw_world(self, sim):
        self._draw_topbar()
        self._draw_grid(sim.environment_type)
        fr = max(2, int(self._scale() * 0.3))
        for f in sim.foods:
            pygame.draw.circle(self.screen, FOOD_COLORS.get(f.food_type, (200,200,200)),
                               self.world_to_screen(f.x, f.y), fr)
        sel = sim.selected.id if sim.selected is not None else None
        fol = sim.followed.id if sim.followed is not None else None
        for c in sim.creatures:
            self._draw_creature(c, c.id == sel, c.id == fol)
        if self.show_legend:
            self._draw_legend()

    # ---------- Trait panel ----------
    def _chrome(self, title: str, subtitle: str):
        pr = self.panel_rect_outer
        pc = self.panel_content
        pygame.draw.rect(self.screen, PANEL_BG, pr)
        pygame.draw.rect(self.screen, (70,75,85), pr, 2)
        title_surf = self.bigfont.render(title, True, (220,220,230))
        subtitle_surf = self.font.render(subtitle, True, (160,165,175))
        self.screen.blit(title_surf, (pc.x, pc.y))
        sub_y = pc.y + title_surf.get_height() + TITLE_GAP
        self.screen.blit(subtitle_surf, (pc.x, sub_y))
        return sub_y + subtitle_surf.get_height() + SECTION_GAP

    def draw_trait_panel(self, sim):
        pc = self.panel_content
        y0 = self._chrome("Trait Cloud (Speed, Size)", "Color = species | click a creature to select")

        plot_h = max(140, int(pc.h * 0.45))
        box = pygame.Rect(pc.x + PLOT_SIDE_PAD, y0 + PLOT_TOP_PAD,
                          max(80, pc.w - 2 * PLOT_SIDE_PAD), plot_h)
        pygame.draw.rect(self.screen, (25,30,36), box)

        pop = sim.creatures
        if not pop:
            self.screen.blit(self.font.render("Extinct", True, (220,80,80)), (box.x + 10, box.y + 10))
            return

        for c in pop:
            tx = _clamp01(c.genes.speed)
            ty = _clamp01((c.genes.size - 0.3) / 0.7)
            sx = box.x + box.w * tx
            sy = box.bottom - box.h * ty
            hue = (c.species_id or 0) * 47 % 360
            pygame.draw.circle(self.screen, hue_color(hue), (int(sx), int(sy)), 3 + int(3 * c.fitness))

        axis = (160,165,175)
        pygame.draw.line(self.screen, axis, box.bottomleft, box.bottomright, 1)
        pygame.draw.line(self.screen, axis, box.bottomleft, box.topleft, 1)
        xt = self.font.render("Speed", True, (220,220,230))
        self.screen.blit(xt, (box.x + (box.w - xt.get_width()) // 2, box.bottom + 4))
        yt = pygame.transform.rotate(self.font.render("Size", True, (220,220,230)), 90)
        self.screen.blit(yt, (box.x - yt.get_width() - 6, box.y + (box.h - yt.get_height()) // 2))

        spark = pygame.Rect(pc.x, box.bottom + PLOT_BOTTOM_PAD, pc.w, 70)
        self._draw_sparkline(spark, sim.fitness_history)

        legend = pygame.Rect(pc.x, spark.bottom + SECTION_GAP, pc.w, max(40, pc.bottom - spark.bottom - SECTION_GAP))
        pygame.draw.rect(self.screen, (25,30,36), legend)
        counts = Counter(c.species_id for c in pop if c.species_id is not None)
        x, y = legend.x + 10, legend.y + 8
        for sid, cnt in counts.most_common():
            if y > legend.bottom - 16:
                break
            pygame.draw.rect(self.screen, hue_color(sid * 47 % 360), (x, y+4, 16, 10))
            self.screen.blit(self.font.render(f"Species {sid}: {cnt}", True, (190,195,205)), (x+24, y))
            y += 18

    def _draw_sparkline(self, rect: pygame.Rect, history):
        pygame.draw.rect(self.screen, (25,30,36), rect)
        self.screen.blit(self.font.render("Top fitness (last generations)", True, (160,165,175)), (rect.x + 6, rect.y + 4))
        if len(history) < 2:
            return
        inner = rect.inflate(-12, -28).move(0, 10)
        n = len(history)
        pts = []
        for i, v in enumerate(history):
            px = inner.x + inner.w * i / (n - 1)
            py = inner.bottom - inner.h * _clamp01(v / 100.0)
            pts.append((int(px), int(py)))
        pygame.draw.lines(self.screen, (240,160,60), False, pts, 2)

    # ---------- Phylogeny panel ----------
    def draw_phylogeny_panel(self, lineage, current_generation: int):
        pc = self.panel_content
        y0 = self._chrome("Phylogenetic Tree (Species)", "Y = generations, X = branch layout | T toggles")
        area = pygame.Rect(pc.x, y0, pc.w, pc.bottom - y0)
        pygame.draw.rect(self.screen, (25,30,36), area)
        if not lineage.has_data():
            return

        cols = lineage.compute_layout_columns()
        ncols = max(1, len(cols))
        gens = max(1, current_generation)

        def xy(sid, g):
            x = area.x + 8 + (area.w - 16) * (cols.get(sid, 0) + 0.5) / ncols
            y = area.y + 8 + (area.h - 16) * g / gens
            return int(x), int(y)

        for sid, g0, g1, parent, hue in lineage.segments(current_generation):
            col = hue_color(hue)
            top, bottom = xy(sid, g0), xy(sid, g1)
            if parent >= 0:
                pygame.draw.line(self.screen, (110,115,125), xy(parent, g0), top, 1)
            pygame.draw.line(self.screen, col, top, bottom, 3 if lineage.nodes[sid].current_count else 1)

    def draw_panel(self, sim):
        if self.panel_mode == "traits":
            self.draw_trait_panel(sim)
        else:
            self.draw_phylogeny_panel(sim.lineage, sim.current_generation)

    def draw_hud(self, sim, sim_speed, rec_enabled):
        sel = sim.selected
        sel_line = "Selected: none"
        if sel is not None:
            g = sel.genes
            sel_line = (f"Selected: #{sel.id} gen {sel.generation} species {sel.species_id}  "
                        f"fit {sel.fitness:.2f}  energy {sel.energy:.0f}  age {sel.age}  "
                        f"speed {g.speed:.2f} size {g.size:.2f} diet {g.diet_type}")
        lines = [
            f"Generation: {sim.current_generation}   Environment: {sim.environment_type}   "
            f"Population: {len(sim.creatures)}   Food: {len(sim.foods)}/{sim.max_food_count()}   "
            f"Species: {sim.species_count()}",
            f"Mutation rate: {sim.mutation_rate:.0f}  Sim speed: {sim_speed} ticks/frame  "
            f"{sim.state.value.upper()}  {'REC ON' if rec_enabled else 'REC OFF'}",
            sel_line,
            "Controls:",
            " Space Pause   R Reset   B Breed   M Mutate   F Follow   E Next env   +/- Food   [ ] SimSpeed",
            " ,/. Mutation rate   V record   C clear record   S save NPZ   T panel   L legend   Esc quit",
        ]
        x = HUD_PAD_X
        y = HUD_PAD_Y
        for i, s in enumerate(lines):
            col = (225,225,235) if i < 3 else (170,175,185)
            self.screen.blit(self.font.render(s, True, col), (x, y))
            y += 16
