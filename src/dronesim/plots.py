"""
Visualization functions for recorded flights.

Provides plots for analyzing altitude, attitude and collision behaviour.
"""

from typing import Optional

import numpy as np

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from dronesim.types import FlightLog


def plot_altitude(
    log: FlightLog,
    title: str = "Altitude vs Time",
    target: Optional[float] = None,
    show: bool = False,
) -> Figure:
    """
    Plot altitude and vertical velocity over time.

    Args:
        log: Flight log
        title: Plot title
        target: Optional reference height drawn as a dashed line
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    axes[0].plot(log.t, log.p[:, 1], 'b-', linewidth=1.5, label='Altitude')
    if target is not None:
        axes[0].axhline(target, color='k', linestyle='--', alpha=0.7, label='Target')
    hold = log.altitude_hold
    if np.any(hold):
        axes[0].fill_between(log.t, log.p[:, 1].min(), log.p[:, 1].max(),
                             where=hold, color='g', alpha=0.1, label='Altitude hold')
    axes[0].set_ylabel('Y [m]')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(log.t, log.v[:, 1], 'r-', linewidth=1.5)
    axes[1].set_ylabel('v_y [m/s]')
    axes[1].set_xlabel('Time [s]')
    axes[1].grid(True, alpha=0.3)

    fig.suptitle(title)
    fig.tight_layout()

    if show:
        plt.show()

    return fig


def plot_attitude(
    log: FlightLog,
    title: str = "Attitude",
    show: bool = False,
) -> Figure:
    """
    Plot pitch/yaw/roll angles and the world-Y of the body up axis.

    Args:
        log: Flight log
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig, axes = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    labels = ['Pitch', 'Yaw', 'Roll']
    colors = ['r', 'g', 'b']
    for i in range(3):
        axes[0].plot(log.t, np.degrees(log.euler[:, i]), colors[i],
                     label=labels[i], linewidth=1.5)
    axes[0].set_ylabel('Angle [deg]')
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(log.t, log.up[:, 1], 'k-', linewidth=1.5)
    axes[1].axhline(0.0, color='gray', linestyle=':')
    axes[1].set_ylim(-1.05, 1.05)
    axes[1].set_ylabel('up.y')
    axes[1].set_xlabel('Time [s]')
    axes[1].grid(True, alpha=0.3)

    fig.suptitle(title)
    fig.tight_layout()

    if show:
        plt.show()

    return fig


def plot_3d_path(
    log: FlightLog,
    title: str = "3D Path",
    show: bool = False,
) -> Figure:
    """
    Plot the flown path in 3D (world Y drawn as the vertical axis).

    Args:
        log: Flight log
        title: Plot title
        show: If True, call plt.show()

    Returns:
        matplotlib Figure
    """
    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection='3d')

    ax.plot(log.p[:, 0], log.p[:, 2], log.p[:, 1], 'r-', linewidth=1.5, label='Path')
    ax.scatter(log.p[0, 0], log.p[0, 2], log.p[0, 1], c='g', s=100, label='Start', marker='o')
    ax.scatter(log.p[-1, 0], log.p[-1, 2], log.p[-1, 1], c='r', s=100, label='End', marker='x')

    ax.set_xlabel('X [m]')
    ax.set_ylabel('Z [m]')
    ax.set_zlabel('Y [m]')
    ax.set_title(title)
    ax.legend()

    fig.tight_layout()

    if show:
        plt.show()

    return fig
