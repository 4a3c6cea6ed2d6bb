"""
Validation Against Reference Solutions
======================================
Checks the closed-form solver two ways:

  1. Against hand-derived reference cases (one per environment) from
     the textbook drag-free relations
         T = (vy + sqrt(vy² + 2 g h0)) / g
         H = h0 + vy² / (2g)
         R = vx · T
  2. Against numerical integration of the same equations of motion
     with scipy's adaptive Runge-Kutta (solve_ivp) and a ground-impact
     event.

Both must agree to well under 0.1 %.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List
from scipy.integrate import solve_ivp

from .environment import LaunchParameters
from .solver import Trajectory, solve_parameters


# ══════════════════════════════════════════════════════════════════════════
#  Reference cases
# ══════════════════════════════════════════════════════════════════════════

# (label, v0 m/s, angle°, h0 m, environment, tof_s, max_height_m, range_m)
REFERENCE_CASES = [
    ('Earth 50 m/s @ 45°',        50.0, 45.0,  0.0, 'earth',    7.2154,  63.776, 255.102),
    ('Moon 20 m/s @ 30°',         20.0, 30.0,  0.0, 'moon',    12.3457,  30.864, 213.833),
    ('Mars 30 m/s @ 60°, 10 m',   30.0, 60.0, 10.0, 'mars',    14.3807, 100.970, 215.711),
    ('Jupiter 80 m/s @ 45°',      80.0, 45.0,  0.0, 'jupiter',  4.5638,  64.542, 258.169),
    ('Earth 20 m/s flat, 20 m',   20.0,  0.0, 20.0, 'earth',    2.0203,  20.000,  40.406),
]

PASS_THRESHOLD_PCT = 0.1


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    label: str
    ref_range: float
    sim_range: float
    range_error_pct: float
    ref_max_height: float
    sim_max_height: float
    height_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float

    @property
    def worst_error_pct(self) -> float:
        return max(abs(self.range_error_pct), abs(self.height_error_pct),
                   abs(self.tof_error_pct))


def _error_pct(sim: float, ref: float) -> float:
    return 100.0 * (sim - ref) / ref if ref else 0.0


def _compare(label: str, traj: Trajectory, ref_tof: float,
             ref_height: float, ref_range: float) -> ValidationResult:
    return ValidationResult(
        label=label,
        ref_range=ref_range,
        sim_range=traj.max_range,
        range_error_pct=_error_pct(traj.max_range, ref_range),
        ref_max_height=ref_height,
        sim_max_height=traj.max_height,
        height_error_pct=_error_pct(traj.max_height, ref_height),
        ref_tof=ref_tof,
        sim_tof=traj.time_of_flight,
        tof_error_pct=_error_pct(traj.time_of_flight, ref_tof),
    )


# ══════════════════════════════════════════════════════════════════════════
#  Numerical reference
# ══════════════════════════════════════════════════════════════════════════

def integrate_numerically(params: LaunchParameters,
                          rtol: float = 1e-10, atol: float = 1e-10) -> dict:
    """
    Integrate d[x, y, vx, vy]/dt = [vx, vy, 0, -g] until y crosses 0
    going down. Returns 'time_of_flight', 'range', 'max_height' and the
    dense 't', 'x', 'y' histories.
    """
    g = params.gravity
    theta = np.radians(params.angle_deg)
    v0 = params.initial_velocity
    state0 = [0.0, params.initial_height, v0 * np.cos(theta), v0 * np.sin(theta)]

    def rhs(t, s):
        return [s[2], s[3], 0.0, -g]

    def ground(t, s):
        return s[1]
    ground.terminal = True
    ground.direction = -1

    vy0 = state0[3]
    t_max = 2.0 * (vy0 + np.sqrt(vy0 ** 2 + 2.0 * g * params.initial_height)) / g + 1.0
    sol = solve_ivp(rhs, (0.0, t_max), state0, events=ground,
                    rtol=rtol, atol=atol, dense_output=True)

    if sol.t_events[0].size:
        t_hit = float(sol.t_events[0][0])
    else:
        t_hit = float(sol.t[-1])
    t = np.linspace(0.0, t_hit, 400)
    x, y, _, _ = sol.sol(t)
    return {
        'time_of_flight': t_hit,
        'range': float(sol.sol(t_hit)[0]),
        'max_height': float(np.max(y)),
        't': t,
        'x': x,
        'y': y,
    }


# ══════════════════════════════════════════════════════════════════════════
#  Runners
# ══════════════════════════════════════════════════════════════════════════

def validate_against_reference(cases=REFERENCE_CASES,
                               verbose: bool = True) -> List[ValidationResult]:
    """Solve every reference case and compare with the tabulated values."""
    results = []

    if verbose:
        print(f"\n{'='*84}")
        print(f"  VALIDATION: closed-form solver vs hand-derived references")
        print(f"{'='*84}")
        print(f"{'Case':<26} {'Ref R':>9} {'Sim R':>9} {'Err %':>7} "
              f"{'Ref H':>8} {'Sim H':>8} {'Err %':>7} "
              f"{'Ref T':>7} {'Sim T':>7}")
        print("-" * 84)

    for label, v0, angle, h0, env, ref_tof, ref_h, ref_r in cases:
        params = LaunchParameters.create(v0, angle, h0, env)
        traj = solve_parameters(params)
        vr = _compare(label, traj, ref_tof, ref_h, ref_r)
        results.append(vr)

        if verbose:
            print(f"{label:<26} {ref_r:>9.2f} {vr.sim_range:>9.2f} "
                  f"{vr.range_error_pct:>+7.3f} "
                  f"{ref_h:>8.2f} {vr.sim_max_height:>8.2f} {vr.height_error_pct:>+7.3f} "
                  f"{ref_tof:>7.3f} {vr.sim_tof:>7.3f}")

    if verbose:
        _print_footer(results)
    return results


def validate_against_integration(cases=REFERENCE_CASES,
                                 verbose: bool = True) -> List[ValidationResult]:
    """Compare the closed form with scipy's numerical integration."""
    results = []

    if verbose:
        print(f"\n{'='*84}")
        print(f"  VALIDATION: closed-form solver vs solve_ivp (RK45)")
        print(f"{'='*84}")

    for label, v0, angle, h0, env, *_ in cases:
        params = LaunchParameters.create(v0, angle, h0, env)
        traj = solve_parameters(params)
        num = integrate_numerically(params)
        vr = _compare(label, traj, num['time_of_flight'],
                      num['max_height'], num['range'])
        results.append(vr)

        if verbose:
            print(f"  {label:<26}  worst error {vr.worst_error_pct:.2e} %")

    if verbose:
        _print_footer(results)
    return results


def _print_footer(results: List[ValidationResult]):
    worst = max(r.worst_error_pct for r in results)
    print("-" * 84)
    print(f"  Worst absolute error: {worst:.4f}%")
    status = "✓ PASS" if worst < PASS_THRESHOLD_PCT else "✗ FAIL"
    print(f"  Status: {status}")
    print(f"{'='*84}\n")


def run_all_validations(verbose: bool = True) -> Dict[str, List[ValidationResult]]:
    return {
        'reference': validate_against_reference(verbose=verbose),
        'integration': validate_against_integration(verbose=verbose),
    }


if __name__ == "__main__":
    run_all_validations(verbose=True)
