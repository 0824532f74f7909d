"""
NsCallbacks: C++ trampolines for Python events on the ns-3 clock

ns-3 schedules EventImpl objects; cppyy converts a Python callable to a
std::function, which pythonMakeEvent wraps and keeps alive until
ClearPythonCallbacks() runs at teardown.

Copyright (c) 2025 CDoS Mitigation Study
Licensed under the MIT License
"""

import os
from ns import ns
import cppyy

_defined = False


def setup_cppyy_callbacks():
    """
    Define pythonMakeEvent / ClearPythonCallbacks in the cppyy global namespace.

    Safe to call more than once per process. When NS3_ROOT points at an ns-3
    source tree, its build/include directory is added to the include path.
    """
    global _defined
    if _defined:
        return

    ns3_root = os.environ.get("NS3_ROOT")
    if ns3_root:
        cppyy.add_include_path(os.path.join(os.path.abspath(ns3_root), "build/include"))

    ns.cppyy.cppdef(r"""
    #include "ns3/event-id.h"
    #include "ns3/make-event.h"
    #include <vector>
    #include <functional>
    #include <memory>
    using namespace ns3;

    static std::vector<std::shared_ptr<std::function<void()>>> _py_store;

    EventImpl* pythonMakeEvent(std::function<void()> f) {
        auto func_ptr = std::make_shared<std::function<void()>>(std::move(f));
        _py_store.push_back(func_ptr);
        return MakeEvent(*func_ptr);
    }

    void ClearPythonCallbacks() {
        _py_store.clear();
    }
    """)
    _defined = True


def schedule(delay: float, callback, refs: list):
    """Schedule `callback` after `delay` simulated seconds; `refs` keeps it referenced."""
    refs.append(callback)
    return ns.Simulator.Schedule(ns.Seconds(delay), ns.cppyy.gbl.pythonMakeEvent(callback))


def clear_callbacks():
    if _defined:
        ns.cppyy.gbl.ClearPythonCallbacks()
