"""
Configuration for the family type views generator.

Defines the Config class with the knobs for family loading, instance layout,
view labelling, transaction naming and run reporting.
"""

import os


DEFAULT_LABEL_FORMAT = "{ordinal} - Symbol {symbol} Type {instance}"

_STRUCTURAL_TYPES = ("NonStructural", "Beam", "Brace", "Column", "Footing", "UnknownFraming")


class Config:
    """Configuration for one generation run.

    Attributes:
        family_file (str): Family definition file name or path (default: "family.rfa")
        working_dir (str): Directory relative family paths resolve against (default: None = cwd)
        spacing_factor (float): Cursor advance per instance, in bbox widths (default: 2.0)
        first_ordinal (int): Ordinal of the first generated label (default: 2)
        label_format (str): View/filter name pattern with {ordinal}, {symbol}, {instance}
        structural_type (str): Structural kind passed to instance creation (default: "NonStructural")
        load_transaction_name (str): Name of the load/generate/view transaction
        cleanup_transaction_name (str): Name of the default view deletion transaction
        delete_default_view (bool): Delete the pre-existing non-template 3D view (default: True)
        verify_layout (bool): Check generated bboxes for X overlap after layout (default: True)
        raise_on_host_error (bool): Propagate host failures after rollback (default: True)
        output_dir (str): Where to write the views manifest (default: None = no export)
        max_diag_events (int): Event cap for the Diagnostics recorder (default: 200)
        verbose (bool): Echo diagnostics as trace lines (default: False)

    Commentary:
        ✔ spacing_factor=2.0 leaves one full bbox width of clearance after each instance
        ✔ first_ordinal=2 because slot 1 belongs to the default 3D view
        ⚠ label_format must produce unique names; views and filters share it

    Example:
        >>> cfg = Config()
        >>> cfg.spacing_factor
        2.0
        >>> cfg.make_label(2, "A", "A1")
        '2 - Symbol A Type A1'
    """

    def __init__(
        self,
        family_file="family.rfa",
        working_dir=None,
        spacing_factor=2.0,
        first_ordinal=2,
        label_format=DEFAULT_LABEL_FORMAT,
        structural_type="NonStructural",
        load_transaction_name="Load family and create instances",
        cleanup_transaction_name="Delete default 3d view",
        delete_default_view=True,
        verify_layout=True,
        raise_on_host_error=True,
        output_dir=None,
        max_diag_events=200,
        verbose=False,
    ):
        self.family_file = str(family_file)
        self.working_dir = working_dir
        self.spacing_factor = float(spacing_factor)
        self.first_ordinal = int(first_ordinal)
        self.label_format = str(label_format)
        self.structural_type = str(structural_type)
        self.load_transaction_name = str(load_transaction_name)
        self.cleanup_transaction_name = str(cleanup_transaction_name)
        self.delete_default_view = bool(delete_default_view)
        self.verify_layout = bool(verify_layout)
        self.raise_on_host_error = bool(raise_on_host_error)
        self.output_dir = output_dir
        self.max_diag_events = int(max_diag_events)
        self.verbose = bool(verbose)

        # Validate
        if not self.family_file:
            raise ValueError("family_file must be a non-empty path")
        if self.spacing_factor <= 0:
            raise ValueError("spacing_factor must be positive")
        if self.first_ordinal < 0:
            raise ValueError("first_ordinal must be non-negative")
        if self.structural_type not in _STRUCTURAL_TYPES:
            raise ValueError("structural_type must be one of {0}".format(", ".join(_STRUCTURAL_TYPES)))
        if self.max_diag_events <= 0:
            raise ValueError("max_diag_events must be positive")
        if not self.load_transaction_name or not self.cleanup_transaction_name:
            raise ValueError("transaction names must be non-empty")

        # label_format must accept the three fields and nothing else
        try:
            self.label_format.format(ordinal=0, symbol="", instance="")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError("label_format is invalid: {0}".format(e))

    def make_label(self, ordinal, symbol_name, instance_name):
        """Build the view/filter label for one generated instance."""
        return self.label_format.format(ordinal=ordinal, symbol=symbol_name, instance=instance_name)

    def resolve_family_path(self):
        """Absolute path of the family file (relative paths join working_dir or cwd)."""
        if os.path.isabs(self.family_file):
            return self.family_file
        base = self.working_dir or os.getcwd()
        return os.path.join(base, self.family_file)

    def __repr__(self):
        return (
            f"Config(family_file='{self.family_file}', "
            f"working_dir={self.working_dir!r}, "
            f"spacing_factor={self.spacing_factor}, "
            f"first_ordinal={self.first_ordinal}, "
            f"label_format='{self.label_format}', "
            f"structural_type='{self.structural_type}', "
            f"delete_default_view={self.delete_default_view}, "
            f"verify_layout={self.verify_layout}, "
            f"raise_on_host_error={self.raise_on_host_error}, "
            f"output_dir={self.output_dir!r})"
        )

    def to_dict(self):
        """Export configuration as dictionary for JSON serialization."""
        return {
            "family_file": self.family_file,
            "working_dir": self.working_dir,
            "spacing_factor": self.spacing_factor,
            "first_ordinal": self.first_ordinal,
            "label_format": self.label_format,
            "structural_type": self.structural_type,
            "load_transaction_name": self.load_transaction_name,
            "cleanup_transaction_name": self.cleanup_transaction_name,
            "delete_default_view": self.delete_default_view,
            "verify_layout": self.verify_layout,
            "raise_on_host_error": self.raise_on_host_error,
            "output_dir": self.output_dir,
            "max_diag_events": self.max_diag_events,
            "verbose": self.verbose,
        }

    @classmethod
    def from_dict(cls, d):
        """Create Config from dictionary (e.g., from JSON)."""
        return cls(
            family_file=d.get("family_file", "family.rfa"),
            working_dir=d.get("working_dir"),
            spacing_factor=d.get("spacing_factor", 2.0),
            first_ordinal=d.get("first_ordinal", 2),
            label_format=d.get("label_format", DEFAULT_LABEL_FORMAT),
            structural_type=d.get("structural_type", "NonStructural"),
            load_transaction_name=d.get("load_transaction_name", "Load family and create instances"),
            cleanup_transaction_name=d.get("cleanup_transaction_name", "Delete default 3d view"),
            delete_default_view=d.get("delete_default_view", True),
            verify_layout=d.get("verify_layout", True),
            raise_on_host_error=d.get("raise_on_host_error", True),
            output_dir=d.get("output_dir"),
            max_diag_events=d.get("max_diag_events", 200),
            verbose=d.get("verbose", False),
        )
