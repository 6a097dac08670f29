# trajectory.py — perfil quíntico, planificación y muestreo de trayectorias
import math
import logging
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from robot2r.robot_2r import (
    DEFAULT_LINKS, GRIPPER_LENGTH, ElbowMode, JointConfiguration, forward_kinematics,
    inverse_kinematics,
)

logger = logging.getLogger(__name__)


# ---------- Errores ----------
class PlanningError(Exception):
    """Error base de planificación."""


class UnreachableTarget(PlanningError):
    def __init__(self, target):
        self.target = target
        super().__init__(
            f"Objetivo fuera del espacio de trabajo: ({target.x:.4f}, {target.y:.4f})")


class InvalidDuration(PlanningError, ValueError):
    pass


class InvalidTimeStep(PlanningError, ValueError):
    pass


# ---------- Tipos ----------
@dataclass(frozen=True)
class QuinticProfile:
    a0: float
    a1: float
    a2: float
    a3: float
    a4: float
    a5: float
    duration: float

    @property
    def coefficients(self):
        return (self.a0, self.a1, self.a2, self.a3, self.a4, self.a5)


@dataclass(frozen=True)
class ProfileState:
    q: float
    dq: float
    ddq: float


@dataclass(frozen=True)
class MotionPlan:
    profile1: QuinticProfile
    profile2: QuinticProfile
    target: JointConfiguration
    duration: float


@dataclass(frozen=True)
class TrajectorySample:
    t: float
    q1: float
    dq1: float
    ddq1: float
    q2: float
    dq2: float
    ddq2: float
    x: float
    y: float
    xt: Optional[float] = None
    yt: Optional[float] = None

    @property
    def has_tip(self):
        return self.xt is not None and self.yt is not None


# ---------- Perfil quíntico ----------
def fit_quintic(q0, qf, duration):
    """Perfil de 5º orden con velocidad y aceleración nulas en los extremos."""
    if not (math.isfinite(duration) and duration > 0):
        raise InvalidDuration(f"La duración debe ser positiva, se recibió {duration!r}")
    dq = qf - q0
    tf3 = duration ** 3
    tf4 = tf3 * duration
    tf5 = tf4 * duration
    return QuinticProfile(
        a0=q0, a1=0.0, a2=0.0,
        a3=10.0 * dq / tf3,
        a4=-15.0 * dq / tf4,
        a5=6.0 * dq / tf5,
        duration=duration,
    )


def evaluate(profile, t):
    """q, dq, ddq en el instante t (sin recortar t)."""
    a0, a1, a2, a3, a4, a5 = profile.coefficients
    t2 = t * t
    t3 = t2 * t
    t4 = t3 * t
    t5 = t4 * t
    q = a0 + a1 * t + a2 * t2 + a3 * t3 + a4 * t4 + a5 * t5
    dq = a1 + 2 * a2 * t + 3 * a3 * t2 + 4 * a4 * t3 + 5 * a5 * t4
    ddq = 2 * a2 + 6 * a3 * t + 12 * a4 * t2 + 20 * a5 * t3
    return ProfileState(q, dq, ddq)


def evaluate_many(profile, times):
    """Igual que evaluate pero vectorizado; devuelve tres arrays (q, dq, ddq)."""
    t = np.asarray(times, dtype=float)
    a0, a1, a2, a3, a4, a5 = profile.coefficients
    q = np.polyval([a5, a4, a3, a2, a1, a0], t)
    dq = np.polyval([5 * a5, 4 * a4, 3 * a3, 2 * a2, a1], t)
    ddq = np.polyval([20 * a5, 12 * a4, 6 * a3, 2 * a2], t)
    return q, dq, ddq


# ---------- Planificación ----------
def plan_move(target, current, links=DEFAULT_LINKS, duration=20.0, elbow=ElbowMode.UP):
    """Plan articular desde current hasta target, o UnreachableTarget."""
    sol = inverse_kinematics(target, links, elbow)
    if not sol.reachable:
        logger.warning("Objetivo fuera del espacio de trabajo: (%.4f, %.4f)", target.x, target.y)
        raise UnreachableTarget(target)

    p1 = fit_quintic(current.q1, sol.theta1, duration)
    p2 = fit_quintic(current.q2, sol.theta2, duration)
    logger.debug("Plan: q0=(%.4f, %.4f) -> qf=(%.4f, %.4f) en %.2f s",
                 current.q1, current.q2, sol.theta1, sol.theta2, duration)
    return MotionPlan(p1, p2, sol.configuration, duration)


# ---------- Muestreo ----------
def sample_times(duration, dt):
    """Instantes de muestreo: al menos dos, el último exactamente en duration."""
    if not (math.isfinite(dt) and dt > 0):
        raise InvalidTimeStep(f"El paso de muestreo debe ser positivo, se recibió {dt!r}")
    n = max(2, int(math.floor(duration / dt)) + 1)
    times = np.minimum(duration, np.arange(n) * dt)
    times[-1] = duration
    return times


def _tip(x, y, qsum, gripper_length):
    half = gripper_length * 0.5
    return x + half * math.cos(qsum), y + half * math.sin(qsum)


def sample_trajectory(plan, links=DEFAULT_LINKS, dt=0.05, gripper_offset=False,
                      gripper_length=GRIPPER_LENGTH):
    """Discretiza el plan en una lista ordenada de TrajectorySample."""
    times = sample_times(plan.duration, dt)
    q1, dq1, ddq1 = evaluate_many(plan.profile1, times)
    q2, dq2, ddq2 = evaluate_many(plan.profile2, times)

    pts = []
    for i, t in enumerate(times):
        a, b = float(q1[i]), float(q2[i])
        cd = forward_kinematics(a, b, links)
        xt = yt = None
        if gripper_offset:
            xt, yt = _tip(cd.x, cd.y, a + b, gripper_length)
        pts.append(TrajectorySample(
            t=float(t),
            q1=a, dq1=float(dq1[i]), ddq1=float(ddq1[i]),
            q2=b, dq2=float(dq2[i]), ddq2=float(ddq2[i]),
            x=cd.x, y=cd.y,
            xt=xt, yt=yt,
        ))
    logger.debug("Trayectoria muestreada: %d puntos, dt=%.3f", len(pts), dt)
    return pts


def with_tip_offset(samples, enabled, gripper_length=GRIPPER_LENGTH):
    """Recalcula (o borra) la punta de pinza sin tocar t, q, x, y."""
    out = []
    for p in samples:
        if enabled:
            xt, yt = _tip(p.x, p.y, p.q1 + p.q2, gripper_length)
            out.append(replace(p, xt=xt, yt=yt))
        else:
            out.append(replace(p, xt=None, yt=None))
    return out


def interpolate_pose(samples, t):
    """(q1, q2) interpolados linealmente en t, recortado a [0, T]."""
    if not samples:
        raise ValueError("Trayectoria vacía")
    if len(samples) == 1:
        return samples[0].q1, samples[0].q2
    times = [p.t for p in samples]
    t = min(max(t, times[0]), times[-1])
    i = int(np.searchsorted(times, t, side="right")) - 1
    i = max(0, min(len(samples) - 2, i))
    a, b = samples[i], samples[i + 1]
    span = b.t - a.t
    alpha = (t - a.t) / span if span > 0 else 1.0
    return a.q1 + (b.q1 - a.q1) * alpha, a.q2 + (b.q2 - a.q2) * alpha


def as_arrays(samples):
    """Columnas t, q1, q2 como arrays de numpy (para graficar)."""
    t = np.array([p.t for p in samples])
    q1 = np.array([p.q1 for p in samples])
    q2 = np.array([p.q2 for p in samples])
    return t, q1, q2
