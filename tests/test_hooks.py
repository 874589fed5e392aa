from trenchtools.hooks import Hook


def test_hook_stack():
    hook = Hook(lambda: 2)
    assert hook() == 2
    hook.set(lambda prev: lambda: prev() + 1)
    assert hook() == 3


def test_hook_passes_arguments():
    hook = Hook(lambda a, b=1: a * b)
    assert hook(3, b=4) == 12
    hook.set(lambda prev: lambda a, b=1: prev(a, b=b) + 100)
    assert hook(2, b=5) == 110


def test_hook_stacking_multiple_times():
    hook = Hook(lambda: "a")
    hook.set(lambda prev: lambda: prev() + "b")
    hook.set(lambda prev: lambda: prev() + "c")
    assert hook() == "abc"


def test_hook_repr_names_function():
    def spawner():
        return None

    assert repr(Hook(spawner)).startswith("Hook<")
    assert "spawner" in repr(Hook(spawner))