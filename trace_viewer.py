"""
Trace Viewer: desktop stepper for trace-table programs.
CustomTkinter + Tkinter hybrid GUI in the Catppuccin dark theme: the code
panel highlights the current and already-executed lines, the trace table
grows one row per step, and the output console mirrors the PRINT log.
"""
import re
import tkinter as tk
from tkinter import ttk, font as tkfont
import customtkinter as ctk

from ide_theme import COLORS, KEYWORDS_CONTROL, KEYWORDS_IO, KEYWORDS_OP
from interpreter import MAX_STEPS, TraceInterpreter
from programs import PROGRAMS, SampleProgram
from trace_table import TraceCursor, build_rows, table_headers

ctk.set_appearance_mode("dark")

_WORD_GROUPS = [
    ("keyword_control", KEYWORDS_CONTROL),
    ("keyword_io", KEYWORDS_IO),
    ("keyword_op", KEYWORDS_OP),
]


class TraceViewer:
    """Steps forward and back through a precomputed trace."""

    def __init__(self, root, programs=PROGRAMS, max_steps=MAX_STEPS):
        self.root = root
        self.programs = list(programs)
        self.interpreter = TraceInterpreter(max_steps)
        self.program = self.programs[0]
        self.trace = None
        self.cursor = None

        self.root.title("Trace Table Stepper")
        self.root.geometry("1200x700")
        self.root.configure(fg_color=COLORS["bg_tertiary"])
        self.code_font = tkfont.Font(family="Cascadia Code", size=12)

        self._build_toolbar()
        self._build_panels()
        self._bind_shortcuts()
        self.reset()

    # ═══════ Layout ═══════

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self.root, fg_color=COLORS["toolbar_bg"], corner_radius=0, height=44)
        bar.pack(fill="x")
        bar.pack_propagate(False)

        self.program_menu = ctk.CTkOptionMenu(
            bar, values=[p.name for p in self.programs],
            fg_color=COLORS["button_bg"], button_color=COLORS["surface"],
            button_hover_color=COLORS["button_hover"], text_color=COLORS["text"],
            command=self._on_program_selected,
        )
        self.program_menu.pack(side="left", padx=10, pady=8)

        for text, command in (("Reset", self.reset), ("◀ Back", self.back), ("Step ▶", self.step)):
            ctk.CTkButton(
                bar, text=text, font=("Segoe UI", 10),
                fg_color=COLORS["button_bg"], text_color=COLORS["text"],
                hover_color=COLORS["button_hover"], corner_radius=6,
                width=80, height=28, command=command,
            ).pack(side="left", padx=4, pady=8)

        self.status = ctk.CTkLabel(bar, text="", font=("Segoe UI", 11, "bold"),
                                   text_color=COLORS["accent"])
        self.status.pack(side="right", padx=12)

    def _build_panels(self):
        paned = tk.PanedWindow(self.root, orient="horizontal", bg=COLORS["bg_tertiary"],
                               sashwidth=4, bd=0)
        paned.pack(fill="both", expand=True)

        self.code = tk.Text(paned, font=self.code_font, bg=COLORS["bg"], fg=COLORS["text"],
                            relief="flat", bd=0, padx=8, pady=8, wrap="none", width=40)
        self.code.tag_configure("line_num", foreground=COLORS["line_num_fg"])
        self.code.tag_configure("executed", background=COLORS["executed_line"])
        self.code.tag_configure("current", background=COLORS["current_line"])
        self.code.tag_configure("keyword_control", foreground=COLORS["mauve"])
        self.code.tag_configure("keyword_io", foreground=COLORS["peach"])
        self.code.tag_configure("keyword_op", foreground=COLORS["yellow"])
        self.code.tag_raise("current")
        paned.add(self.code, stretch="always")

        right = tk.Frame(paned, bg=COLORS["bg"])
        paned.add(right, stretch="always")

        style = ttk.Style(self.root)
        style.theme_use("clam")
        style.configure("Trace.Treeview", background=COLORS["bg"], foreground=COLORS["text"],
                        fieldbackground=COLORS["bg"], font=("Cascadia Code", 10), rowheight=26)
        style.configure("Trace.Treeview.Heading", background=COLORS["surface"],
                        foreground=COLORS["accent"], font=("Segoe UI", 10, "bold"))
        self.tree = ttk.Treeview(right, show="headings", style="Trace.Treeview")
        self.tree.tag_configure('even', background=COLORS["bg"])
        self.tree.tag_configure('odd', background=COLORS["bg_secondary"])
        self.tree.tag_configure('current', background=COLORS["selection"])
        self.tree.pack(fill="both", expand=True)

        ctk.CTkLabel(right, text="  OUTPUT", font=("Segoe UI", 9, "bold"),
                     text_color=COLORS["subtext"], anchor="w").pack(fill="x")
        self.output = tk.Text(right, height=8, font=("Cascadia Code", 11), bg=COLORS["output_bg"],
                              fg=COLORS["green"], relief="flat", bd=0, padx=12, pady=8)
        self.output.pack(fill="x")

    def _bind_shortcuts(self):
        self.root.bind("<Right>", lambda e: self.step())
        self.root.bind("<Left>", lambda e: self.back())
        self.root.bind("<Home>", lambda e: self.reset())

    # ═══════ Commands ═══════

    def load(self, program: SampleProgram):
        """Show a program that is not one of the bundled samples."""
        if program not in self.programs:
            self.programs.append(program)
            self.program_menu.configure(values=[p.name for p in self.programs])
        self.program_menu.set(program.name)
        self._on_program_selected(program.name)

    def _on_program_selected(self, name):
        self.program = next(p for p in self.programs if p.name == name)
        self.reset()

    def reset(self):
        self.trace = self.interpreter.run(self.program.code)
        self.cursor = TraceCursor(self.trace)
        self._show_code()
        self.render()

    def step(self):
        if self.cursor.forward():
            self.render()

    def back(self):
        if self.cursor.back():
            self.render()

    # ═══════ Rendering ═══════

    def _show_code(self):
        self.code.configure(state="normal")
        self.code.delete("1.0", "end")
        for number, line in enumerate(self.program.code, start=1):
            self.code.insert("end", f"{number:>3}  ", "line_num")
            self.code.insert("end", line + "\n")
        text = self.code.get("1.0", "end")
        for tag, words in _WORD_GROUPS:
            pattern = rf"\b({'|'.join(re.escape(w) for w in words)})\b"
            for m in re.finditer(pattern, text):
                self.code.tag_add(tag, f"1.0+{m.start()}c", f"1.0+{m.end()}c")
        self.code.configure(state="disabled")

    def render(self):
        snap = self.cursor.current
        self.code.tag_remove("current", "1.0", "end")
        self.code.tag_remove("executed", "1.0", "end")
        for line_index in self.trace.executed_lines(self.cursor.index):
            self.code.tag_add("executed", f"{line_index + 1}.0", f"{line_index + 1}.end+1c")
        if snap.started:
            self.code.tag_add("current", f"{snap.line_index + 1}.0", f"{snap.line_index + 1}.end+1c")
            self.code.see(f"{snap.line_index + 1}.0")

        self._render_table()

        self.output.configure(state="normal")
        self.output.delete("1.0", "end")
        self.output.insert("end", "\n".join(snap.output))
        self.output.see("end")
        self.output.configure(state="disabled")

        line = snap.line_index + 1 if snap.started else "-"
        note = "  │  step limit reached" if self.trace.halted_by_step_limit else ""
        self.status.configure(
            text=f"Step {self.cursor.index} / {len(self.trace) - 1}  │  Line {line}{note}")

    def _render_table(self):
        headers = [h for h in table_headers(self.trace) if h != 'Line']
        self.tree.delete(*self.tree.get_children())
        self.tree.configure(columns=headers)
        for h in headers:
            self.tree.heading(h, text=h)
            self.tree.column(h, width=60 if h == 'Step' else 100, anchor='center')

        rows = build_rows(self.trace, self.cursor.index)
        for i, row in enumerate(rows):
            tag = 'current' if row.step == self.cursor.index else ('even' if i % 2 == 0 else 'odd')
            self.tree.insert('', 'end', values=[row.step, *row.cells, row.output], tags=(tag,))
        if rows:
            self.tree.see(self.tree.get_children()[-1])


def run_viewer(program: SampleProgram = None, max_steps: int = MAX_STEPS):
    root = ctk.CTk()
    viewer = TraceViewer(root, max_steps=max_steps)
    if program is not None:
        viewer.load(program)
    root.mainloop()
