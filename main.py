#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  PROJECTILE SANDBOX & TARGET GAME — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete pipeline headlessly:
    1. Gravity environments
    2. Reference trajectory (closed form)
    3. Environment comparison
    4. Validation (references + scipy integration)
    5. Sandbox playback through the frame clock
    6. Game mode: aim, launch and score all three levels
    7. Dashboard
    8. Animated playback GIF

  All outputs saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip animation (faster)
═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import os
import time
import logging
import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from projectile_sim.config import DEFAULT_CONFIG
from projectile_sim.environment import ENVIRONMENTS, VELOCITY_BOUNDS, LaunchParameters
from projectile_sim.game import GameMode, GameSession
from projectile_sim.hit_detection import evaluate
from projectile_sim.solver import solve, solve_parameters
from projectile_sim.targets import TARGETS, Target, target_for_level
from projectile_sim.validation import validate_against_reference, validate_against_integration
from projectile_sim.visualization import (
    plot_trajectory, plot_environment_comparison, plot_dashboard,
    plot_validation, create_playback_animation, ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     PROJECTILE SANDBOX & TARGET GAME                                  ║
║     ─────────────────────────────────────────────────────             ║
║     Closed-form ballistics · Earth · Moon · Mars · Jupiter            ║
║     Frame-driven playback │ Swept-path hit detection                  ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def aim_for_target(target: Target, params: LaunchParameters,
                   margin: float = DEFAULT_CONFIG.hit_margin,
                   step: float = 0.25):
    """
    Launch speed at the current angle whose arc passes closest to the
    target centre, or None if no speed in range registers a hit.
    """
    best, best_d = None, np.inf
    for v in np.arange(VELOCITY_BOUNDS[0], VELOCITY_BOUNDS[1] + step, step):
        traj = solve(v, params.angle_deg, params.initial_height, params.gravity)
        result = evaluate(traj, target, margin=margin)
        if result.is_hit and result.closest_distance < best_d:
            best, best_d = float(v), result.closest_distance
    return best


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    banner()
    out = ensure_output_dir('outputs')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Gravity Environments
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Gravity Environments")
    print(f"  {'Key':<10} {'Name':<10} {'g (m/s²)':>9}")
    for key, env in ENVIRONMENTS.items():
        print(f"  {key:<10} {env['name']:<10} {env['gravity']:>9.2f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Reference Trajectory
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Reference Trajectory (Earth, 50 m/s @ 45°)")

    params = LaunchParameters.create(initial_velocity=50.0, angle_deg=45.0)
    reference = solve_parameters(params)
    print(reference.summary())

    fig_traj = plot_trajectory(reference, title='Earth, 50 m/s @ 45°',
                               save_path=f'{out}/01_reference_trajectory.png')
    plt.close(fig_traj)
    print(f"  ✓ Saved: {out}/01_reference_trajectory.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Environment Comparison
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Environment Comparison (Same Launch Conditions)")

    env_results = {}
    for key in ENVIRONMENTS:
        traj = solve_parameters(params.with_environment(key))
        env_results[key] = traj
        print(f"  {ENVIRONMENTS[key]['name']:<10s}  "
              f"Range: {traj.max_range:>8.1f} m  "
              f"Max H: {traj.max_height:>7.1f} m  "
              f"ToF: {traj.time_of_flight:>6.2f} s")

    fig_env = plot_environment_comparison(env_results,
                                          save_path=f'{out}/02_environment_comparison.png')
    plt.close(fig_env)
    print(f"\n  ✓ Saved: {out}/02_environment_comparison.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Validation")
    val_ref = validate_against_reference()
    val_num = validate_against_integration()
    fig_val = plot_validation(val_ref, title='Range vs Hand-Derived References',
                              save_path=f'{out}/03_validation_reference.png')
    plt.close(fig_val)
    fig_val2 = plot_validation(val_num, title='Range vs solve_ivp',
                               save_path=f'{out}/03b_validation_integration.png')
    plt.close(fig_val2)
    print(f"  ✓ Saved: {out}/03_validation_reference.png")
    print(f"  ✓ Saved: {out}/03b_validation_integration.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Sandbox Playback
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Sandbox Playback")

    sandbox = GameSession(parameters=params, mode=GameMode.SANDBOX)
    sandbox.launch()
    peak_particles = 0
    while sandbox.state.running:
        frame = sandbox.tick()
        peak_particles = max(peak_particles, len(frame.particles))
    print(f"  Frames played : {sandbox.clock.frame}  "
          f"({sandbox.clock.elapsed:.2f} s at {sandbox.clock.frame_rate:.0f} fps)")
    print(f"  Peak particles: {peak_particles}")
    print(f"  Phase         : {sandbox.state.phase.value}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Game Mode
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Game Mode — All Levels")

    game = GameSession(parameters=LaunchParameters.create(angle_deg=40.0))
    for level in range(1, len(TARGETS) + 1):
        target = target_for_level(level)
        v = aim_for_target(target, game.parameters)
        if v is None:
            print(f"  Level {level}: no hitting speed at {game.parameters.angle_deg:.0f}°")
            break
        game.update_parameters(initial_velocity=v)
        game.launch()
        state = game.run_until_idle()
        print(f"  Level {level} [{target.description}]  v0={v:6.2f} m/s  "
              f"→ {state.last_result.value.upper():<4}  score={state.score}")
        if state.is_victory:
            print(f"\n  🏆 All levels completed! Final score: {state.score}")
        elif not game.next_level():
            break

    fig_game = plot_trajectory(game.trajectory, target=game.target,
                               title=f'Level {game.state.level} shot',
                               save_path=f'{out}/04_game_final_shot.png')
    plt.close(fig_game)
    print(f"  ✓ Saved: {out}/04_game_final_shot.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Dashboard
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 7: Dashboard")
    fig_dash = plot_dashboard(reference, launch_label='50 m/s @ 45°',
                              save_path=f'{out}/05_dashboard.png')
    plt.close(fig_dash)
    print(f"  ✓ Saved: {out}/05_dashboard.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 8: Playback Animation
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 8: Playback Animation (GIF)")
        create_playback_animation(game.trajectory, target=game.target,
                                  config=DEFAULT_CONFIG.with_overrides(seed=7),
                                  save_path=f'{out}/06_playback.gif')
        print(f"  ✓ Saved: {out}/06_playback.gif")
    else:
        section("PHASE 8: Animation SKIPPED (--quick mode)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"""
  All outputs saved to: {os.path.abspath(out)}/

  Generated files:
    01_reference_trajectory.png     — Closed-form reference arc
    02_environment_comparison.png   — Same launch on four worlds
    03_validation_reference.png     — Solver vs hand-derived values
    03b_validation_integration.png  — Solver vs numerical integration
    04_game_final_shot.png          — Last game shot with its target
    05_dashboard.png                — Flight data dashboard
    {'06_playback.gif                 — Animated playback' if not quick else '(animation skipped)'}

  Total runtime: {elapsed:.1f} seconds
""")


if __name__ == "__main__":
    main()
