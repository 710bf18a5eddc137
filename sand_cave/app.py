import solara
from matplotlib.figure import Figure
from mesa.visualization import Slider, SolaraViz, make_plot_component
from mesa.visualization.utils import update_counter

from sand_cave.config import SimulationConfig, ViewConfig
from sand_cave.model import SandCaveModel
from sand_cave.plotting import draw_cave


def make_cave_component(view=None):
    view = view or ViewConfig()

    @solara.component
    def CaveView(model):
        update_counter.get()
        fig = Figure(figsize=view.figure_size)
        ax = fig.subplots()
        draw_cave(ax, model, view)
        solara.FigureMatplotlib(fig)

    return CaveView


defaults = SimulationConfig()

model_params = {
    "floor": {
        "type": "Checkbox",
        "value": defaults.floor,
        "label": "Synthesise Floor",
    },
    "halt_on_void": {
        "type": "Checkbox",
        "value": defaults.halt_on_void,
        "label": "Stop When A Grain Is Lost",
    },
    "spawn_interval": Slider("Ticks Between Grains", defaults.spawn_interval, 1, 10),
}

model = SandCaveModel(**defaults.model_kwargs())

grain_chart = make_plot_component(["Settled", "Falling"], backend="matplotlib")

Page = SolaraViz(
    model,
    components=[make_cave_component(), grain_chart],
    model_params=model_params,
    name="Sand Cave",
    play_interval=max(1, int(1000 / defaults.ticks_per_second)),
)

if __name__ == "__main__":
    print("Run the viewer with:")
    print("    solara run sand_cave.app")
