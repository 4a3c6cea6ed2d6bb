"""
Visualization Engine
====================
Read-only consumers of solver and playback output:
  1. Trajectory (height vs downrange), optionally with a level target
  2. Environment comparison (same launch on every world)
  3. Dashboard with key metrics
  4. Validation comparison plot
  5. Animated playback with particle trail (saved as GIF)

The animation draws in screen space through the same ScreenTransform
that places the targets, so what is drawn matches what hit detection
measures.
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec
from matplotlib.colors import hsv_to_rgb
from matplotlib.patches import Circle
from typing import Dict, Optional, Sequence
import os

from .config import SimulatorConfig, DEFAULT_CONFIG
from .environment import ENVIRONMENTS
from .particles import Particle
from .playback import PlaybackEngine
from .solver import Trajectory, format_measurement
from .targets import Target, TARGETS


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'projectile_color': '#ff6b6b',
    'target_color': '#ffeb3b',
    'ground_color': '#8b7355',
    'font_family': 'monospace',
}

def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def particle_rgba(particles: Sequence[Particle]) -> np.ndarray:
    """RGBA rows for particles; hsl(h, 100%, 50%) is hsv(h, 1, 1)."""
    if not particles:
        return np.zeros((0, 4))
    hsv = np.array([[p.hue / 360.0, 1.0, 1.0] for p in particles])
    rgba = np.ones((len(particles), 4))
    rgba[:, :3] = hsv_to_rgb(hsv)
    rgba[:, 3] = np.clip([p.alpha for p in particles], 0.0, 1.0)
    return rgba


# ══════════════════════════════════════════════════════════════════════════
#  1. Single Trajectory Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(trajectory: Trajectory, target: Optional[Target] = None,
                    hit_margin: float = DEFAULT_CONFIG.hit_margin,
                    title: str = 'Projectile Trajectory',
                    save_path: str = None, show: bool = False) -> plt.Figure:
    """Height vs downrange for a single trajectory."""
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    ax.plot(trajectory.x, trajectory.y, '.-',
            color=STYLE['accent_colors'][0], linewidth=2, markersize=3,
            label='Path')

    if not trajectory.is_empty:
        ax.plot(0, trajectory.y[0], 'o', color='#00e676', markersize=10,
                label='Launch', zorder=5)
        ax.plot(trajectory.max_range, 0, 'x', color='#ff5252',
                markersize=12, markeredgewidth=3, label='Impact', zorder=5)
        ax.axhline(trajectory.max_height, color='#00e676', linestyle='--',
                   alpha=0.6, label=f'Max height {trajectory.max_height:.2f} m')

    if target is not None:
        ax.add_patch(Circle((target.x, target.y), target.radius,
                            color=STYLE['target_color'], alpha=0.8))
        ax.add_patch(Circle((target.x, target.y), target.radius + hit_margin,
                            fill=False, linestyle=':',
                            edgecolor=STYLE['target_color'], alpha=0.6))

    ax.set_xlabel('Downrange (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)
    ax.set_title(title, fontsize=13, fontweight='bold')
    ax.set_aspect('equal', adjustable='datalim')
    _legend(ax, loc='upper right', fontsize=10)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Environment Comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_environment_comparison(results: Dict[str, Trajectory],
                                save_path: str = None) -> plt.Figure:
    """Same launch on every world, side by side."""
    fig, axes = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, axes)

    ax = axes[0]
    for key, traj in results.items():
        env = ENVIRONMENTS[key]
        ax.plot(traj.x, traj.y, color=env['color'], linewidth=2,
                label=f"{env['name']} (g={env['gravity']:.2f})")
    ax.set_xlabel('Downrange (m)')
    ax.set_ylabel('Height (m)')
    ax.set_title('Trajectory Comparison', fontweight='bold')
    _legend(ax, fontsize=9)
    ax.set_ylim(bottom=0)

    ax = axes[1]
    names = [ENVIRONMENTS[k]['name'] for k in results]
    ranges = [results[k].max_range for k in results]
    colors = [ENVIRONMENTS[k]['color'] for k in results]
    bars = ax.barh(names, ranges, color=colors, alpha=0.85, edgecolor='#555')
    ax.set_xlabel('Range (m)')
    ax.set_title('Range Comparison', fontweight='bold')
    for bar, r in zip(bars, ranges):
        ax.text(bar.get_width(), bar.get_y() + bar.get_height()/2,
                f' {r:.1f} m', va='center', color=STYLE['text_color'], fontsize=10)

    fig.suptitle('Gravity Environments — Same Launch Conditions',
                 fontsize=15, fontweight='bold', color=STYLE['text_color'], y=1.02)
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Dashboard
# ══════════════════════════════════════════════════════════════════════════

def plot_dashboard(trajectory: Trajectory, launch_label: str = '',
                   save_path: str = None) -> plt.Figure:
    """Trajectory, flight data panel, height and speed histories."""
    fig = plt.figure(figsize=(18, 10))
    fig.patch.set_facecolor(STYLE['bg_color'])

    gs = gridspec.GridSpec(2, 3, figure=fig, hspace=0.35, wspace=0.3)

    ax1 = fig.add_subplot(gs[0, :2])
    _apply_dark_style(fig, ax1)
    ax1.plot(trajectory.x, trajectory.y, color='#00d4ff', linewidth=2.5)
    ax1.plot(trajectory.max_range, 0, 'x', color='#ff5252',
             markersize=14, markeredgewidth=3)
    ax1.set_xlabel('Downrange (m)')
    ax1.set_ylabel('Height (m)')
    ax1.set_title('TRAJECTORY', fontweight='bold', fontsize=13)
    ax1.set_ylim(bottom=0)

    ax_info = fig.add_subplot(gs[0, 2])
    ax_info.set_facecolor('#111111')
    ax_info.axis('off')

    metrics = [
        ('LAUNCH', launch_label or '-'),
        ('RANGE', f'{format_measurement(trajectory.max_range)} m'),
        ('MAX HEIGHT', f'{format_measurement(trajectory.max_height)} m'),
        ('FLIGHT TIME', f'{format_measurement(trajectory.time_of_flight)} s'),
        ('IMPACT VEL', f'{format_measurement(trajectory.impact_velocity)} m/s'),
        ('IMPACT ANGLE', f'{format_measurement(trajectory.impact_angle_deg)}°'),
        ('SAMPLES', f'{len(trajectory)}'),
    ]

    for i, (label, value) in enumerate(metrics):
        y_pos = 0.92 - i * 0.13
        ax_info.text(0.05, y_pos, label, fontsize=10, fontweight='bold',
                     color='#888888', transform=ax_info.transAxes, fontfamily='monospace')
        ax_info.text(0.95, y_pos, value, fontsize=11, fontweight='bold',
                     color='#00d4ff', transform=ax_info.transAxes,
                     ha='right', fontfamily='monospace')

    ax_info.set_title('FLIGHT DATA', fontweight='bold',
                      color=STYLE['text_color'], fontsize=13, pad=10)

    ax2 = fig.add_subplot(gs[1, 0])
    _apply_dark_style(fig, ax2)
    ax2.plot(trajectory.t, trajectory.y, color='#00e676', linewidth=2)
    ax2.set_xlabel('Time (s)')
    ax2.set_ylabel('Height (m)')
    ax2.set_title('HEIGHT', fontweight='bold')

    ax3 = fig.add_subplot(gs[1, 1])
    _apply_dark_style(fig, ax3)
    ax3.plot(trajectory.t, trajectory.speed, color='#ff6b35', linewidth=2)
    ax3.set_xlabel('Time (s)')
    ax3.set_ylabel('Speed (m/s)')
    ax3.set_title('SPEED', fontweight='bold')

    ax4 = fig.add_subplot(gs[1, 2])
    _apply_dark_style(fig, ax4)
    ax4.plot(trajectory.t, trajectory.x, color='#e040fb', linewidth=2)
    ax4.set_xlabel('Time (s)')
    ax4.set_ylabel('Downrange (m)')
    ax4.set_title('DOWNRANGE', fontweight='bold')

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation Plot
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results, title: str = 'Solver Validation',
                    save_path: str = None) -> plt.Figure:
    """Simulated vs reference range, and per-case errors."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)

    labels = [v.label for v in validation_results]
    idx = np.arange(len(labels))
    ref_ranges = [v.ref_range for v in validation_results]
    sim_ranges = [v.sim_range for v in validation_results]

    ax = axes[0]
    ax.bar(idx - 0.2, ref_ranges, width=0.4, color='#ffeb3b', label='Reference')
    ax.bar(idx + 0.2, sim_ranges, width=0.4, color='#00d4ff', label='Solver')
    ax.set_xticks(idx)
    ax.set_xticklabels(labels, rotation=20, ha='right', fontsize=8)
    ax.set_ylabel('Range (m)')
    ax.set_title(title, fontweight='bold')
    _legend(ax, fontsize=10)

    ax = axes[1]
    errors = [v.worst_error_pct for v in validation_results]
    colors = ['#00e676' if e < 0.1 else '#ff5252' for e in errors]
    ax.bar(idx, errors, color=colors, alpha=0.8)
    ax.set_xticks(idx)
    ax.set_xticklabels(labels, rotation=20, ha='right', fontsize=8)
    ax.set_ylabel('Worst Error (%)')
    ax.set_title('Validation Error', fontweight='bold')

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  5. Animated Playback (GIF)
# ══════════════════════════════════════════════════════════════════════════

def create_playback_animation(trajectory: Trajectory,
                              target: Optional[Target] = None,
                              config: SimulatorConfig = DEFAULT_CONFIG,
                              save_path: str = 'outputs/playback.gif',
                              tail_frames: int = 30,
                              fps: int = 30) -> str:
    """
    Play `trajectory` through a PlaybackEngine and record every tick,
    plus `tail_frames` extra ticks so the particle trail can fade.
    """
    from matplotlib.animation import FuncAnimation, PillowWriter

    transform = config.transform
    engine = PlaybackEngine(config, rng=np.random.default_rng(config.seed))

    width, height = config.canvas_width, config.canvas_height
    fig, ax = plt.subplots(figsize=(width / 100, height / 100))
    fig.patch.set_facecolor(STYLE['bg_color'])
    ax.set_facecolor(STYLE['bg_color'])
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect('equal')
    ax.axis('off')

    ax.axhspan(transform.origin_y, height, color=STYLE['ground_color'])
    for t in [target] if target is not None else TARGETS:
        cx, cy = transform.to_screen(t.x, t.y)
        ax.add_patch(Circle((cx, cy), transform.length(t.radius),
                            color=STYLE['target_color'],
                            alpha=0.9 if t is target else 0.25))

    px, py = transform.to_screen(trajectory.x, trajectory.y)
    ax.plot(px, py, color=STYLE['projectile_color'], linewidth=1.5, alpha=0.5)

    point, = ax.plot([], [], 'o', color=STYLE['projectile_color'], markersize=8)
    trail = ax.scatter([], [], s=6)
    status = ax.text(10, 20, '', color=STYLE['text_color'],
                     fontsize=10, fontfamily='monospace')

    engine.launch(trajectory)
    total_frames = len(trajectory) + tail_frames

    def animate(_):
        frame = engine.tick()
        if frame.sample is not None:
            sx, sy = transform.to_screen(frame.sample.x, frame.sample.y)
            point.set_data([sx], [sy])
            status.set_text(f't={frame.sample.t:5.2f}s  x={frame.sample.x:6.1f} m  '
                            f'y={frame.sample.y:5.1f} m')
        if frame.particles:
            trail.set_offsets([(p.x, p.y) for p in frame.particles])
        else:
            trail.set_offsets(np.zeros((0, 2)))
        trail.set_facecolors(particle_rgba(frame.particles))
        return point, trail, status

    anim = FuncAnimation(fig, animate, frames=total_frames,
                         interval=1000 / fps, blit=True)
    anim.save(save_path, writer=PillowWriter(fps=fps),
              savefig_kwargs={'facecolor': STYLE['bg_color']})
    plt.close(fig)
    print(f"  Animation saved: {save_path}")
    return save_path
