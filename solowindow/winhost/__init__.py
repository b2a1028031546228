"""
solowindow.winhost - Windows desktop host (Windows only).

This package contains:
    - win32        : Win32 API layer (pywin32; ctypes where it has no wrapper)
    - combo_parser : "alt+shift+p" -> (modifiers, vk); platform independent
    - filter       : Which top-level windows are listed / normal
    - monitor      : Monitor enumeration and lookup via pywin32
    - window       : Win32Window - the Window implementation for an HWND
    - keybinds     : HotkeyManager - global hotkeys via RegisterHotKey
    - manager      : Win32Host - WinEvent hook -> HostEvents, message loop

Nothing is imported here so that combo_parser stays importable on any
platform; import the submodules directly.
"""
