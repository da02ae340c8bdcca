# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import numpy as np
import matplotlib.pyplot as plt

from typing import Dict, Optional, Tuple

from .scene import SceneGeometry
# ------------------------------------------------------------------------------------------------ #


class MatplotlibRenderer:
    """
    Draws scene geometry on a matplotlib 3D axes.

    Static scenery (the central body and a polar grid in the reference plane) is
    drawn once. The orbit, apsides line, direction arrow, satellite and the three
    anomaly segments are created on the first call to `draw` and updated on
    every later call.

    Attributes
    ----------
    fig : matplotlib.figure.Figure
        Figure holding the scene.
    ax : mpl_toolkits.mplot3d.Axes3D
        The 3D axes the scene is drawn on.
    artists : dict
        Artists created by `draw`, keyed by name.
    """

    background_color = 'black'
    body_color = '#00dd00'
    grid_color = '#444444'
    orbit_color = '#0000ff'
    apsides_color = '#aaaa00'
    arrow_color = '#ffff00'
    satellite_color = '#ff0000'
    anomaly_colors = {
        'true': '#dd0000',
        'eccentric': '#ffc0cb',
        'mean': '#00dd00',
    }

    body_radius = 1.5
    arrow_length = 3.0
    satellite_size = 8

    def __init__(
            self,
            ax: Optional[plt.Axes] = None,
            figsize: Tuple[int, int] = (9, 9),
            axis_limit: float = 15.0,
            grid_radius: float = 10.0,
            elev: float = 20.0,
            azim: float = 45.0,
            **orbit_kwargs,
        ) -> None:
        """
        Set up the axes and draw the static scenery.

        Parameters
        ----------
        ax : Axes3D, optional
            Existing 3D axes to draw on. If None, a new figure and axes are created.
        figsize : tuple, optional
            Figure size if a new figure is created. Defaults to (9, 9).
        axis_limit : float, optional
            Half-width of the cube shown. Defaults to 15.
        grid_radius : float, optional
            Radius of the reference plane grid. Defaults to 10.
        elev, azim : float, optional
            Initial camera elevation and azimuth (degrees).
        **orbit_kwargs:
            Extra keyword arguments for the orbit line, passed to ``ax.plot``
            (for example color, linewidth, alpha).
        """
        if ax is None:
            self.fig = plt.figure(figsize=figsize)
            self.ax = self.fig.add_subplot(111, projection='3d')
        else:
            self.fig = ax.figure
            self.ax = ax

        self.axis_limit = axis_limit
        self.grid_radius = grid_radius

        self.orbit_kwargs = {'color': self.orbit_color, 'linewidth': 2}
        self.orbit_kwargs.update(orbit_kwargs)

        self.artists: Dict[str, object] = {}
        self.n_draws = 0

        self._setup_axes(elev, azim)
        self._draw_body()
        self._draw_reference_grid()

    def _setup_axes(self, elev: float, azim: float) -> None:
        lim = self.axis_limit
        self.fig.patch.set_facecolor(self.background_color)
        self.ax.set_facecolor(self.background_color)
        self.ax.set_xlim(-lim, lim)
        self.ax.set_ylim(-lim, lim)
        self.ax.set_zlim(-lim, lim)
        self.ax.set_box_aspect((1, 1, 1))
        self.ax.set_axis_off()
        self.ax.view_init(elev=elev, azim=azim)

    def _draw_body(self) -> None:
        u, v = np.mgrid[0:2 * np.pi:40j, 0:np.pi:20j]
        r = self.body_radius
        x = r * np.cos(u) * np.sin(v)
        y = r * np.sin(u) * np.sin(v)
        z = r * np.cos(v)
        self.ax.plot_surface(x, y, z, color=self.body_color, linewidth=0, alpha=0.9)

    def _draw_reference_grid(self, n_circles: int = 5, n_radials: int = 16) -> None:
        theta = np.linspace(0, 2 * np.pi, 129)
        for radius in np.linspace(0, self.grid_radius, n_circles + 1)[1:]:
            self.ax.plot(radius * np.cos(theta), radius * np.sin(theta), np.zeros_like(theta),
                         color=self.grid_color, linewidth=0.6)
        for angle in np.linspace(0, 2 * np.pi, n_radials, endpoint=False):
            self.ax.plot([0, self.grid_radius * np.cos(angle)], [0, self.grid_radius * np.sin(angle)], [0, 0],
                         color=self.grid_color, linewidth=0.6)

    def draw(self, geometry: SceneGeometry) -> None:
        """
        Draw or redraw the scene for the given geometry.

        Parameters
        ----------
        geometry : SceneGeometry
            Output of a scene recompute.
        """
        if not self.artists:
            self._create_artists(geometry)
        else:
            self._update_artists(geometry)
        self.n_draws += 1

    def _create_artists(self, geometry: SceneGeometry) -> None:
        ax = self.ax
        self.artists['orbit'], = ax.plot(*geometry.orbit.T, **self.orbit_kwargs)
        self.artists['apsides'], = ax.plot(*geometry.apsides.T, color=self.apsides_color,
                                           linewidth=1, linestyle=(0, (5, 4)))
        self.artists['satellite'], = ax.plot(*_column(geometry.satellite), marker='o', linestyle='',
                                             markersize=self.satellite_size, color=self.satellite_color)
        for name, segment in _anomaly_segments(geometry).items():
            self.artists[f'{name}_anomaly'], = ax.plot(*segment.T, color=self.anomaly_colors[name],
                                                       linewidth=1, linestyle='--')
        self.artists['arrow'] = self._draw_arrow(geometry)

    def _update_artists(self, geometry: SceneGeometry) -> None:
        self.artists['orbit'].set_data_3d(*geometry.orbit.T)
        self.artists['apsides'].set_data_3d(*geometry.apsides.T)
        self.artists['satellite'].set_data_3d(*_column(geometry.satellite))
        for name, segment in _anomaly_segments(geometry).items():
            self.artists[f'{name}_anomaly'].set_data_3d(*segment.T)

        # A 3D quiver cannot be re-pointed, so it is replaced
        self.artists['arrow'].remove()
        self.artists['arrow'] = self._draw_arrow(geometry)

    def _draw_arrow(self, geometry: SceneGeometry):
        return self.ax.quiver(
            *geometry.arrow_origin,
            *geometry.arrow_direction,
            length=self.arrow_length,
            color=self.arrow_color,
            arrow_length_ratio=0.3,
        )

    def set_view(self, azim: Optional[float] = None, elev: Optional[float] = None) -> None:
        """Set the camera azimuth and/or elevation (degrees)."""
        self.ax.view_init(
            elev=self.ax.elev if elev is None else elev,
            azim=self.ax.azim if azim is None else azim,
        )

    def rotate(self, step: float) -> None:
        """Turn the camera about the vertical axis by step degrees."""
        self.set_view(azim=(self.ax.azim + step) % 360)

    def save(self, filepath: Optional[str] = None, dpi: int = 300) -> None:
        """
        Save the current figure.

        Raises
        ------
        ValueError: If no filepath is given.
        """
        if filepath is None:
            raise ValueError("`filepath` must be specified to save the figure.")
        self.fig.savefig(filepath, dpi=dpi, facecolor=self.fig.get_facecolor())


def _column(point: np.ndarray) -> np.ndarray:
    # A single point as three length-1 coordinate arrays
    return np.asarray(point).reshape(3, 1)


def _anomaly_segments(geometry: SceneGeometry) -> Dict[str, np.ndarray]:
    return {
        'true': geometry.true_anomaly_segment,
        'eccentric': geometry.eccentric_anomaly_segment,
        'mean': geometry.mean_anomaly_segment,
    }
