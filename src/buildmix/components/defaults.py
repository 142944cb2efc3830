"""Components installed by ``ComponentRegistry.install_all()``, in order."""

from buildmix.components.assets import Copy, Version
from buildmix.components.groups import Groups
from buildmix.components.javascript import JavaScript, React
from buildmix.components.notifications import Notifications
from buildmix.components.styles import Sass
from buildmix.components.tweaks import (
    Alias,
    BabelConfig,
    Define,
    Options,
    Override,
    SetPublicPath,
    SetResourceRoot,
    SourceMaps,
    WebpackConfig,
    When,
)

DEFAULT_COMPONENTS = [
    JavaScript,
    React,
    Sass,
    Define,
    Alias,
    Copy,
    Version,
    Notifications,
    WebpackConfig,
    Override,
    SourceMaps,
    SetPublicPath,
    SetResourceRoot,
    Options,
    When,
    BabelConfig,
    Groups,
]
