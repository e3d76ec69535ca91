# voxel_evo/ui/app.py
from __future__ import annotations
from typing import Optional
import pygame

from .renderer import Renderer, BG_COLOR
from .recorder import Recorder
from .csv_writer import GenerationCsvLogger
from ..sim.population import Simulation, SimState
from ..sim.callbacks import SimulationCallbacks
from ..sim.config import SimulationConfig
from ..sim.environment import next_environment

TICK_DT = 1.0 / 60.0

def _ui_callbacks() -> SimulationCallbacks:
    return SimulationCallbacks(
        on_environment_change=lambda env: print(f"[INFO] environment -> {env}"),
        on_seasonal_change=lambda effect: print(f"[INFO] seasonal effect: {effect}"),
    )

def run_ui(config: Optional[SimulationConfig] = None):
    pygame.init()
    pygame.display.set_caption("Voxel Evolution - Live (Species + Phylogeny)")
    W, H = 1280, 720
    screen = pygame.display.set_mode((W, H), pygame.RESIZABLE | pygame.SCALED)
    clock = pygame.time.Clock()

    def layout():
        w, h = screen.get_size()
        panel_w = int(w * 0.32)
        world_rect = pygame.Rect(10, 10, w - panel_w - 30, h - 20)
        panel_rect = pygame.Rect(w - panel_w - 10, 120, panel_w, h - 140)
        return world_rect, panel_rect

    sim = Simulation(config or SimulationConfig(), _ui_callbacks())
    sim.init_simulation()
    sim.start()

    logger = GenerationCsvLogger()
    world_rect, panel_rect = layout()
    renderer = Renderer(screen, world_rect, panel_rect, sim.config.world_size)
    recorder = Recorder(enabled=False, stride_steps=2, world_size=sim.config.world_size, dt=TICK_DT)

    sim_speed = 1  # ticks/frame
    running = True

    while running:
        clock.tick(60)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode(e.size, pygame.RESIZABLE | pygame.SCALED)
                world_rect, panel_rect = layout()
                renderer.resize(world_rect, panel_rect)
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                picked = renderer.pick(sim, *e.pos)
                if picked is not None:
                    sim.select_creature(picked)
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE: running = False
                elif e.key == pygame.K_SPACE:
                    if sim.running: sim.pause()
                    else: sim.start()
                elif e.key == pygame.K_r:
                    sim.reset()
                    sim.init_simulation()
                    sim.start()
                elif e.key == pygame.K_b:
                    if sim.breed_selected_creature() is None:
                        print("[WARN] breeding needs a selected creature and a partner")
                elif e.key == pygame.K_m:
                    if not sim.force_mutate_creature():
                        print("[WARN] nothing selected to mutate")
                elif e.key == pygame.K_f: sim.toggle_follow_creature()
                elif e.key == pygame.K_e:
                    sim.set_environment_type(next_environment(sim.environment_type))
                elif e.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    sim.set_food_amount(min(30, sim.food_amount + 1))
                elif e.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    sim.set_food_amount(max(1, sim.food_amount - 1))
                elif e.key == pygame.K_PERIOD:
                    sim.set_mutation_rate(min(10, sim.mutation_rate + 1))
                elif e.key == pygame.K_COMMA:
                    sim.set_mutation_rate(max(1, sim.mutation_rate - 1))
                elif e.key == pygame.K_LEFTBRACKET:
                    sim_speed = max(1, sim_speed - 1)
                elif e.key == pygame.K_RIGHTBRACKET:
                    sim_speed = min(40, sim_speed + 1)
                elif e.key == pygame.K_v: recorder.toggle()
                elif e.key == pygame.K_c: recorder.clear()
                elif e.key == pygame.K_s: recorder.save_npz()
                elif e.key == pygame.K_t:
                    renderer.panel_mode = "phylo" if renderer.panel_mode == "traits" else "traits"
                elif e.key == pygame.K_l:
                    renderer.show_legend = not renderer.show_legend

        if sim.state == SimState.RUNNING:
            for _ in range(sim_speed):
                if sim.tick(TICK_DT):
                    logger.append_generation(sim.current_generation, sim.creatures, sim.environment_type)
            recorder.maybe_capture(sim)

        screen.fill(BG_COLOR)
        renderer.draw_world(sim)
        renderer.draw_hud(sim, sim_speed, recorder.enabled)
        renderer.draw_panel(sim)
        pygame.display.flip()

    pygame.quit()
