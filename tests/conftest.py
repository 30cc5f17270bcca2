import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qt_app():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


# ------------------------------------------------------------------------------
# Plotter stand-in (records what the scene does, no OpenGL needed)
# ------------------------------------------------------------------------------

class FakeCamera:
    def __init__(self):
        self.position = (1.0, 1.0, 1.0)
        self.focal_point = (0.0, 0.0, 0.0)
        self.up = (0.0, 1.0, 0.0)
        self.parallel_scale = 1.0
        self.window_center = (0.0, 0.0)
        self.azimuth = 0.0
        self.elevation = 0.0
        self.zoom = 1.0
        self.orthogonalized = 0

    def Azimuth(self, angle):
        self.azimuth += angle

    def Elevation(self, angle):
        self.elevation += angle

    def Zoom(self, factor):
        self.zoom *= factor

    def OrthogonalizeViewUp(self):
        self.orthogonalized += 1

    def SetWindowCenter(self, x, y):
        self.window_center = (x, y)


class FakeVtkInteractor:
    def __init__(self):
        self.style = "default-style"

    def GetInteractorStyle(self):
        return self.style

    def SetInteractorStyle(self, style):
        self.style = style


class FakeIren:
    def __init__(self):
        self.interactor = FakeVtkInteractor()
        self.observers = {}
        self.event_position = (0, 0)
        self._next_id = 1

    def add_observer(self, event, callback):
        obs_id = self._next_id
        self._next_id += 1
        self.observers[obs_id] = (event, callback)
        return obs_id

    def remove_observer(self, obs_id):
        self.observers.pop(obs_id, None)

    def get_event_position(self):
        return self.event_position

    def fire(self, event, position=None):
        if position is not None:
            self.event_position = position
        for name, callback in list(self.observers.values()):
            if name == event:
                callback(None, event)


class FakeRenderer:
    def __init__(self):
        self.clipping_resets = 0

    def ResetCameraClippingRange(self):
        self.clipping_resets += 1


class FakeActor:
    def __init__(self, dataset, kwargs):
        self.dataset = dataset
        self.kwargs = kwargs


class FakePlotter:
    def __init__(self, window_size=(800, 600)):
        self.window_size = window_size
        self.camera = FakeCamera()
        self.iren = FakeIren()
        self.renderer = FakeRenderer()
        self.background = None
        self.parallel_projection = False
        self.actors = []
        self.render_count = 0
        self.closed = False

    def set_background(self, color):
        self.background = color

    def enable_parallel_projection(self):
        self.parallel_projection = True

    def add_mesh(self, dataset, **kwargs):
        actor = FakeActor(dataset, kwargs)
        self.actors.append(actor)
        return actor

    def add_point_labels(self, points, labels, **kwargs):
        actor = FakeActor(points, dict(kwargs, labels=list(labels)))
        self.actors.append(actor)
        return actor

    def remove_actor(self, actor, reset_camera=False, render=True):
        if actor in self.actors:
            self.actors.remove(actor)
            return True
        return False

    def render(self):
        self.render_count += 1

    def close(self):
        self.closed = True


@pytest.fixture
def plotter():
    return FakePlotter()


class RecordingSink:
    """Collects what an UpdateCycle installs."""
    def __init__(self):
        self.calls = []
        self.installed = None
        self.annotations = None

    def install_element(self, mesh, curves, normal=None):
        self.calls.append("install")
        self.installed = (mesh, curves, normal)

    def remove_element(self):
        self.calls.append("remove")
        self.installed = None

    def set_annotations(self, annotations):
        self.calls.append("annotations" if annotations is not None else "clear-annotations")
        self.annotations = annotations


@pytest.fixture
def sink():
    return RecordingSink()
