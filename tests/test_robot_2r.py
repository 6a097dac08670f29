import math

import pytest

from robot2r.robot_2r import (
    DEFAULT_LINKS, CartesianPoint, ElbowMode, LinkLengths, forward_kinematics,
    inverse_kinematics, is_reachable, link_points, reach_limit,
)

LINKS = [LinkLengths(0.12, 0.12), LinkLengths(0.3, 0.2)]


def _same_angle(a, b, tol=1e-7):
    return abs(math.remainder(a - b, 2 * math.pi)) < tol


@pytest.mark.parametrize("links", LINKS)
@pytest.mark.parametrize("q1,q2", [
    (0.3, 1.2), (-2.0, 0.7), (0.0, 2.9), (1.0, -1.5), (2.5, -0.4), (-3.0, -2.2),
])
def test_inverse_recovers_forward(links, q1, q2):
    p = forward_kinematics(q1, q2, links)
    elbow = ElbowMode.UP if math.sin(q2) > 0 else ElbowMode.DOWN
    sol = inverse_kinematics(p, links, elbow)
    assert sol.reachable
    assert _same_angle(sol.theta1, q1)
    assert _same_angle(sol.theta2, q2)


@pytest.mark.parametrize("links", LINKS)
@pytest.mark.parametrize("x,y", [
    (0.14, 0.14), (0.0, 0.0), (0.05, 0.0), (0.24, 0.0), (0.0, -0.5), (0.35, 0.3), (-0.1, 0.2),
])
def test_reachability_flag_agrees(links, x, y):
    p = CartesianPoint(x, y)
    for elbow in ElbowMode:
        assert inverse_kinematics(p, links, elbow).reachable == is_reachable(p, links)


def test_fully_extended_is_reachable():
    links = DEFAULT_LINKS
    assert is_reachable(CartesianPoint(links.l1 + links.l2, 0.0), links)
    assert inverse_kinematics(CartesianPoint(0.0, links.l1 + links.l2), links).reachable
    assert not is_reachable(CartesianPoint(links.l1 + links.l2 + 0.01, 0.0), links)


@pytest.mark.parametrize("links,r,expected", [
    (DEFAULT_LINKS, 0.24 + 5e-10, True),
    (DEFAULT_LINKS, 0.24 + 2e-9, False),
    (LinkLengths(0.3, 0.2), 0.5 + 5e-10, True),
    (LinkLengths(0.3, 0.2), 0.5 + 2e-9, False),
    (LinkLengths(0.3, 0.2), 0.1 - 5e-10, True),
    (LinkLengths(0.3, 0.2), 0.1 - 2e-9, False),
])
def test_reach_tolerance_band(links, r, expected):
    for p in (CartesianPoint(r, 0.0), CartesianPoint(0.0, -r)):
        assert is_reachable(p, links) is expected
        for elbow in ElbowMode:
            sol = inverse_kinematics(p, links, elbow)
            assert sol.reachable is expected
            assert math.isfinite(sol.theta1) and math.isfinite(sol.theta2)


def test_diagonal_point_both_elbows():
    target = CartesianPoint(0.14, 0.14)
    assert target.norm() == pytest.approx(0.19799, abs=1e-4)

    up = inverse_kinematics(target, DEFAULT_LINKS, ElbowMode.UP)
    down = inverse_kinematics(target, DEFAULT_LINKS, "down")
    assert up.reachable and down.reachable
    assert up.theta2 > 0
    assert down.theta2 < 0
    for sol in (up, down):
        p = forward_kinematics(sol.theta1, sol.theta2, DEFAULT_LINKS)
        assert p.x == pytest.approx(0.14, abs=1e-6)
        assert p.y == pytest.approx(0.14, abs=1e-6)


def test_unreachable_still_returns_angles():
    sol = inverse_kinematics(CartesianPoint(1.0, 1.0), DEFAULT_LINKS)
    assert not sol.reachable
    assert math.isfinite(sol.theta1) and math.isfinite(sol.theta2)
    # fuera del anillo se clampa a brazo extendido
    assert sol.theta2 == pytest.approx(0.0, abs=1e-12)


def test_origin_depends_on_equal_links():
    origin = CartesianPoint(0.0, 0.0)
    sol = inverse_kinematics(origin, LinkLengths(0.12, 0.12))
    assert sol.reachable
    assert sol.theta2 == pytest.approx(math.pi)
    assert sol.theta1 == pytest.approx(0.0)

    sol = inverse_kinematics(origin, LinkLengths(0.3, 0.2))
    assert not sol.reachable
    assert math.isfinite(sol.theta1) and math.isfinite(sol.theta2)


def test_degrees_and_configuration():
    sol = inverse_kinematics(CartesianPoint(0.0, 0.24))
    assert sol.theta1_deg == pytest.approx(90.0, abs=1e-4)
    assert sol.theta2_deg == pytest.approx(0.0, abs=1e-4)
    assert sol.configuration.q1 == sol.theta1


def test_link_points_end_matches_forward():
    pts = link_points(0.4, -0.9)
    p = forward_kinematics(0.4, -0.9)
    assert pts[0] == (0.0, 0.0)
    assert pts[2][0] == pytest.approx(p.x)
    assert pts[2][1] == pytest.approx(p.y)


def test_reach_limit_with_gripper():
    assert reach_limit(DEFAULT_LINKS) == pytest.approx(0.24)
    assert reach_limit(DEFAULT_LINKS, 0.02) == pytest.approx(0.26)


@pytest.mark.parametrize("l1,l2", [(0.0, 0.1), (0.1, -0.1)])
def test_invalid_link_lengths(l1, l2):
    with pytest.raises(ValueError):
        LinkLengths(l1, l2)


def test_elbow_parse():
    assert ElbowMode.parse("UP") is ElbowMode.UP
    assert ElbowMode.parse(" down ") is ElbowMode.DOWN
    assert ElbowMode.parse(ElbowMode.DOWN) is ElbowMode.DOWN
    with pytest.raises(ValueError):
        ElbowMode.parse("sideways")
