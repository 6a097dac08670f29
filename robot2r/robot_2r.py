# robot_2r.py — geometría y cinemática del brazo planar 2R
import math
import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

# ---------- Parámetros del robot (m) ----------
L1 = 0.12
L2 = 0.12
GRIPPER_LENGTH = 0.02

# tolerancia única para "validar alcance" y para la bandera de la IK
REACH_TOLERANCE = 1e-9


@dataclass(frozen=True)
class LinkLengths:
    l1: float
    l2: float

    def __post_init__(self):
        if not (self.l1 > 0 and self.l2 > 0):
            raise ValueError(f"Longitudes de eslabón inválidas: l1={self.l1}, l2={self.l2}")

    @property
    def max_reach(self):
        return self.l1 + self.l2

    @property
    def min_reach(self):
        return abs(self.l1 - self.l2)


DEFAULT_LINKS = LinkLengths(L1, L2)


@dataclass(frozen=True)
class CartesianPoint:
    x: float
    y: float

    def norm(self):
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class JointConfiguration:
    q1: float
    q2: float


class ElbowMode(Enum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value):
        """Acepta ElbowMode o 'up'/'down' (sin distinguir mayúsculas)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Modo de codo desconocido: {value!r}") from None


@dataclass(frozen=True)
class IKSolution:
    """Resultado de la IK.

    Los ángulos se devuelven siempre; si reachable es False no son confiables
    pero sirven para mostrar la solución cercana al límite.
    """
    theta1: float
    theta2: float
    reachable: bool

    @property
    def theta1_deg(self):
        return math.degrees(self.theta1)

    @property
    def theta2_deg(self):
        return math.degrees(self.theta2)

    @property
    def configuration(self):
        return JointConfiguration(self.theta1, self.theta2)


def _within_annulus(r, links):
    return links.min_reach - REACH_TOLERANCE <= r <= links.max_reach + REACH_TOLERANCE


def is_reachable(target, links=DEFAULT_LINKS):
    """¿El punto cae dentro del anillo [|l1-l2|, l1+l2]?"""
    return _within_annulus(target.norm(), links)


def reach_limit(links=DEFAULT_LINKS, gripper_length=0.0):
    """Radio exterior del espacio de trabajo (opcionalmente sumando la pinza)."""
    return links.max_reach + gripper_length


# ---------- Cinemática directa ----------
def forward_kinematics(q1, q2, links=DEFAULT_LINKS):
    """Cinemática directa (radianes -> m)."""
    x = links.l1 * math.cos(q1) + links.l2 * math.cos(q1 + q2)
    y = links.l1 * math.sin(q1) + links.l2 * math.sin(q1 + q2)
    return CartesianPoint(x, y)


def link_points(q1, q2, links=DEFAULT_LINKS):
    """Base, codo y efector final, para dibujar."""
    x1 = links.l1 * math.cos(q1)
    y1 = links.l1 * math.sin(q1)
    x2 = x1 + links.l2 * math.cos(q1 + q2)
    y2 = y1 + links.l2 * math.sin(q1 + q2)
    return [(0.0, 0.0), (x1, y1), (x2, y2)]


# ---------- Cinemática inversa ----------
def inverse_kinematics(target, links=DEFAULT_LINKS, elbow=ElbowMode.UP):
    """Cinemática inversa analítica para 2R."""
    elbow = ElbowMode.parse(elbow)
    x, y = target.x, target.y
    l1, l2 = links.l1, links.l2

    r2 = x * x + y * y
    reachable = _within_annulus(math.sqrt(r2), links)

    cos_t2 = (r2 - l1 * l1 - l2 * l2) / (2 * l1 * l2)
    cos_t2 = max(-1.0, min(1.0, cos_t2))

    sin_t2 = math.sqrt(max(0.0, 1.0 - cos_t2 * cos_t2))
    if elbow is ElbowMode.DOWN:
        sin_t2 = -sin_t2

    theta2 = math.atan2(sin_t2, cos_t2)
    k1 = l1 + l2 * cos_t2
    k2 = l2 * sin_t2
    theta1 = math.atan2(y, x) - math.atan2(k2, k1)

    if not reachable:
        logger.debug("IK fuera de alcance para (%.4f, %.4f), r=%.4f", x, y, math.sqrt(r2))
    return IKSolution(theta1, theta2, reachable)
