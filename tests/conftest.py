"""
Pytest fixtures for extmodel tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for extmodel imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from extmodel.configs.runtime import DEFAULT_CONFIG  # noqa: E402


PHYSICIAN_DROPDOWN = '''/**
 * @class App.view.PhysicianDropdown
 * Physician picker.
 * @since 1.2.0
 */
Ext.define("App.view.PhysicianDropdown", {
    extend: "Ext.form.field.ComboBox",
    alias: "widget.physiciandropdown",
    requires: ["App.store.Physicians", "App.util.Format"],
    mixins: ["App.mixin.Loadable"],

    config: {
        /**
         * @cfg {Boolean} showInactive
         * Include inactive physicians.
         */
        showInactive: false
    },

    /**
     * @property {String} displayField
     */
    displayField: "name",

    items: [{
        xtype: "physicianlist",
        layout: { type: "fit" }
    }],

    /**
     * @param {Boolean} refresh Reload the store
     * @returns {Boolean} Whether loading started
     */
    load: function(refresh) {
        const me = this;
        var store = Ext.create("App.store.Physicians", { autoLoad: refresh });
        me.setStore(store);
        return true;
    },

    statics: {
        count: 0,
        reset() {}
    }
});
'''

APP_UTILITIES = '''Ext.define("App.AppUtilities", {
    singleton: true,
    alternateClassName: ["AppUtils"],

    /**
     * Format a name for display.
     * @param {String} first First name
     * @param {String} [last=none] Last name
     * @returns {String}
     */
    formatName(first, last) {
        return first + " " + last;
    },

    privates: {
        cache: null,
        statics: {
            reset: () => null
        }
    }
});
'''

USERS_STORE = '''Ext.define("App.store.Users", {
    extend: "Ext.data.Store",
    alias: "store.users",
    model: "App.model.User",
    proxy: {
        type: "ajax",
        url: "/users"
    }
});
'''


@pytest.fixture(autouse=True)
def isolated_data_path(tmp_path, monkeypatch) -> Path:
    """Point the data directory at a temporary path for every test."""
    data_path = tmp_path / "extmodel-data"
    monkeypatch.setenv("EXTMODEL_DATA_PATH", str(data_path))
    monkeypatch.delenv("EXTMODEL_FACTORY_NAMESPACE", raising=False)
    monkeypatch.delenv("EXTMODEL_STRICT_SYNTAX", raising=False)
    return data_path


@pytest.fixture
def config() -> dict:
    """A copy of the default runtime configuration."""
    return {k: list(v) if isinstance(v, list) else v for k, v in DEFAULT_CONFIG.items()}


@pytest.fixture
def physician_dropdown() -> str:
    return PHYSICIAN_DROPDOWN


@pytest.fixture
def app_utilities() -> str:
    return APP_UTILITIES


@pytest.fixture
def users_store() -> str:
    return USERS_STORE


@pytest.fixture
def source_tree(tmp_path) -> Path:
    """A small application directory with three class files and a readme."""
    root = tmp_path / "app"
    (root / "view").mkdir(parents=True)
    (root / "store").mkdir()
    (root / "view" / "PhysicianDropdown.js").write_text(PHYSICIAN_DROPDOWN)
    (root / "AppUtilities.js").write_text(APP_UTILITIES)
    (root / "store" / "Users.js").write_text(USERS_STORE)
    (root / "README.md").write_text("# App")
    return root
