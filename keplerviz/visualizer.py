# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import math
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.widgets import Slider

from tqdm import tqdm
from typing import Dict, Optional, Tuple

from .definitions import lookup, format_definition
from .elements import is_equatorial, orbit_grade, undefined_elements
from .renderer import MatplotlibRenderer
from .scene import SceneAdapter
# ------------------------------------------------------------------------------------------------ #

UNDEFINED = 'Undef'

GRADE_COLORS = {
    'prograde': 'green',
    'polar': 'white',
    'retrograde': 'orange',
}

# name: (label, min, max, glossary term)
SLIDER_SPECS = {
    'true_anomaly': ('True anomaly ν [°]', -360.0, 360.0, 'true anomaly'),
    'eccentricity': ('Eccentricity e', 0.0, 0.99, 'eccentricity'),
    'semi_major_axis': ('Semi-major axis a', 1.0, 20.0, 'semi-major axis'),
    'argument_of_periapsis': ('Periapsis argument ω [°]', 0.0, 360.0, 'periapsis argument'),
    'inclination': ('Inclination i [°]', 0.0, 180.0, 'inclination'),
    'longitude_of_ascending_node': ('Longitude Ω [°]', 0.0, 360.0, 'longitude'),
}

# Angles the sliders show in degrees
ANGLE_SLIDERS = {'true_anomaly', 'argument_of_periapsis', 'inclination', 'longitude_of_ascending_node'}


class OrbitVisualizer:
    """
    Interactive window: a 3D view of the orbit with sliders for each element.

    The sliders convert their degree values to radians and pass them to the
    scene adapter. A timer calls `tick` once per frame, which turns the camera
    (if auto-rotation is on) and asks the adapter to redraw if anything changed.

    Attributes
    ----------
    adapter : SceneAdapter
        Owner of the orbital state.
    renderer : MatplotlibRenderer
        Draws the scene.
    sliders : dict
        Slider widgets keyed by element name.
    auto_rotate : bool
        Whether the camera turns on every tick.
    rotate_speed : float
        Camera turn per tick (degrees).
    """
    text_color = 'white'
    panel_color = '#222222'

    def __init__(
            self,
            adapter: Optional[SceneAdapter] = None,
            auto_rotate: bool = True,
            rotate_speed: float = 0.5,
            interval: int = 16,
            figsize: Tuple[int, int] = (12, 10),
            verbose: bool = False,
        ) -> None:
        """
        Build the figure, the renderer and the controls.

        Parameters
        ----------
        adapter : SceneAdapter, optional
            Scene state to display. A default scene is created if None.
        auto_rotate : bool, optional
            Turn the camera continuously. Defaults to True.
        rotate_speed : float, optional
            Camera turn per frame in degrees. Defaults to 0.5.
        interval : int, optional
            Delay between frames in milliseconds. Defaults to 16.
        figsize : tuple, optional
            Figure size. Defaults to (12, 10).
        verbose : bool, optional
            Whether to print progress messages.
        """
        self.adapter = adapter if adapter is not None else SceneAdapter(verbose=verbose)
        self.auto_rotate = auto_rotate
        self.rotate_speed = rotate_speed
        self.interval = interval
        self.verbose = verbose
        self.animation = None

        self.fig = plt.figure(figsize=figsize)
        scene_ax = self.fig.add_axes([0.0, 0.32, 0.65, 0.68], projection='3d')
        self.renderer = MatplotlibRenderer(ax=scene_ax)
        self.adapter.renderer = self.renderer

        self.sliders: Dict[str, Slider] = {}
        self._label_terms = {}
        self._build_sliders()
        self._build_text()
        self.fig.canvas.mpl_connect('pick_event', self._on_pick)

        self._on_inclination(self.sliders['inclination'].val)
        self._refresh_periapsis_display()
        self.adapter.update()
        self._refresh_anomaly_readout()

    # Layout
    # -------------------------------------------------------------------------------------------- #

    def _initial_values(self) -> Dict[str, float]:
        e, a, omega, inc, raan = self.adapter.elements.as_tuple()
        return {
            'true_anomaly': math.degrees(self.adapter.true_anomaly),
            'eccentricity': e,
            'semi_major_axis': a,
            'argument_of_periapsis': math.degrees(omega),
            'inclination': math.degrees(inc),
            'longitude_of_ascending_node': math.degrees(raan),
        }

    def _build_sliders(self) -> None:
        initial = self._initial_values()
        callbacks = {
            'true_anomaly': self._on_true_anomaly,
            'eccentricity': self._on_eccentricity,
            'semi_major_axis': self._on_semi_major_axis,
            'argument_of_periapsis': self._on_periapsis_argument,
            'inclination': self._on_inclination,
            'longitude_of_ascending_node': self._on_longitude,
        }

        for row, (name, (label, vmin, vmax, term)) in enumerate(SLIDER_SPECS.items()):
            ax = self.fig.add_axes([0.25, 0.25 - row * 0.04, 0.45, 0.025], facecolor=self.panel_color)
            slider = Slider(
                ax, label, min(vmin, initial[name]), max(vmax, initial[name]), valinit=initial[name],
                valfmt='%.1f' if name in ANGLE_SLIDERS else '%.2f',
            )
            slider.label.set_color(self.text_color)
            slider.valtext.set_color(self.text_color)
            slider.label.set_picker(True)
            slider.on_changed(callbacks[name])

            self.sliders[name] = slider
            self._label_terms[slider.label] = term

    def _build_text(self) -> None:
        self.fig.patch.set_facecolor(self.renderer.background_color)
        self.grade_text = self.fig.text(0.72, 0.09, '', color=self.text_color, fontsize=12, picker=True)
        self._label_terms[self.grade_text] = 'inclination'
        self.anomaly_text = self.fig.text(0.05, 0.95, '', color=self.text_color, fontsize=12, family='monospace')
        self.definition_text = self.fig.text(
            0.67, 0.95, 'Click an element label for its definition.',
            color=self.text_color, fontsize=9, va='top', family='monospace',
        )

    # Slider callbacks
    # -------------------------------------------------------------------------------------------- #

    def _on_true_anomaly(self, value: float) -> None:
        self.adapter.set_true_anomaly(math.radians(value))

    def _on_eccentricity(self, value: float) -> None:
        self.adapter.set_eccentricity(value)
        self._refresh_periapsis_display()

    def _on_semi_major_axis(self, value: float) -> None:
        self.adapter.set_semi_major_axis(value)

    def _on_periapsis_argument(self, value: float) -> None:
        self.adapter.set_argument_of_periapsis(math.radians(value))
        self._refresh_periapsis_display()

    def _on_inclination(self, value: float) -> None:
        self.adapter.set_inclination(math.radians(value))
        self._refresh_inclination_display(value)
        # The node line appears or disappears with the inclination
        self._on_longitude(self.sliders['longitude_of_ascending_node'].val)

    def _on_longitude(self, value: float) -> None:
        slider = self.sliders['longitude_of_ascending_node']
        if is_equatorial(self.adapter.elements.inclination):
            self.adapter.set_longitude_of_ascending_node(0.0)
            slider.valtext.set_text(UNDEFINED)
        else:
            self.adapter.set_longitude_of_ascending_node(math.radians(value))
            slider.valtext.set_text(self._format('longitude_of_ascending_node', value))

    # Display
    # -------------------------------------------------------------------------------------------- #

    def _format(self, name: str, value: float) -> str:
        return ('%.1f' if name in ANGLE_SLIDERS else '%.2f') % value

    def _refresh_periapsis_display(self) -> None:
        slider = self.sliders['argument_of_periapsis']
        if 'argument_of_periapsis' in undefined_elements(self.adapter.elements):
            slider.valtext.set_text(UNDEFINED)
        else:
            slider.valtext.set_text(self._format('argument_of_periapsis', slider.val))

    def _refresh_inclination_display(self, degrees: float) -> None:
        grade = orbit_grade(math.radians(degrees))
        self.grade_text.set_text(grade)
        self.grade_text.set_color(GRADE_COLORS[grade])
        if is_equatorial(self.adapter.elements.inclination):
            self.sliders['longitude_of_ascending_node'].valtext.set_text(UNDEFINED)

    def _refresh_anomaly_readout(self) -> None:
        readout = self.adapter.anomaly_readout()
        self.anomaly_text.set_text(
            f"E = {readout['eccentric']:.1f}°\nM = {readout['mean']:.1f}°"
        )

    def show_definition(self, term: str) -> None:
        """Show the glossary entry for a term in the side panel."""
        self.definition_text.set_text(format_definition(lookup(term), width=40))
        self.fig.canvas.draw_idle()

    def _on_pick(self, event) -> None:
        term = self._label_terms.get(event.artist)
        if term is not None:
            self.show_definition(term)

    # Frame loop
    # -------------------------------------------------------------------------------------------- #

    def tick(self, frame: Optional[int] = None) -> bool:
        """
        Advance one frame.

        Returns
        -------
        bool
            True if the scene was recomputed this frame.
        """
        if self.auto_rotate:
            self.renderer.rotate(self.rotate_speed)
        changed = self.adapter.update()
        if changed:
            self._refresh_anomaly_readout()
        return changed

    def show(self) -> None:
        """Open the interactive window and run the frame loop until it is closed."""
        self.animation = FuncAnimation(self.fig, self.tick, interval=self.interval, cache_frame_data=False)
        plt.show()

    def save_animation(
            self,
            filepath: Optional[str] = None,
            n_frames: int = 120,
            fps: int = 30,
            dpi: int = 100,
            verbose: bool = True,
        ) -> None:
        """
        Save one full camera turn around the current scene as a GIF.

        Parameters
        ----------
        filepath : str, optional
            Output path. Required.
        n_frames : int, optional
            Number of frames in the turn. Defaults to 120.
        fps : int, optional
            Frames per second of the output. Defaults to 30.
        dpi : int, optional
            Resolution of each frame. Defaults to 100.
        verbose : bool, optional
            Whether to show a progress bar.

        Raises
        ------
        ValueError: If no filepath is given or n_frames is not positive.
        """
        if filepath is None:
            raise ValueError("`filepath` must be specified to save the animation.")
        if n_frames <= 0:
            raise ValueError("n_frames must be positive.")

        if self.adapter.update():
            self._refresh_anomaly_readout()

        step = 360.0 / n_frames
        writer = PillowWriter(fps=fps)
        with writer.saving(self.fig, filepath, dpi):
            for _ in tqdm(range(n_frames), desc="Rendering frames", disable=not verbose):
                writer.grab_frame(facecolor=self.fig.get_facecolor())
                self.renderer.rotate(step)

        if verbose:
            print(f"Saved {n_frames} frames to {filepath}")
