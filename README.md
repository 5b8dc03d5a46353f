# eposplugins

Populate an EPOS Platform environment with plugins for the converter.

Given the URL of an environment's gateway and a JSON file describing converter
plugins, the tool:

1. lists every distribution in the environment
   (`GET <gateway>/resources/search?facets=false&q=`),
2. fetches each distribution's details (`GET <gateway>/resources/details/<id>`)
   and maps its operation UID, with any leading `file:///` removed, to the
   distribution ID; distributions whose details cannot be fetched or have no
   operation ID are reported and skipped,
3. posts every plugin to `<gateway>/plugins`, then, for each operation UID the
   plugin lists that exists in the environment, posts a plugin relation to
   `<gateway>/plugin-relations` linking the created plugin to the distribution.

Progress is printed to standard output as coloured `[STEP]`, `[INFO]`,
`[DONE]`, `[WARNING]` and `[ERROR]` lines.

## Installation

```
pip install .
```

## Usage

```
epos-plugin-populator populate GATEWAY_URL PLUGINS_FILE [--plugin-version VERSION]
```

`--plugin-version` replaces the version of every plugin with the given string.
`epos-plugin-populator --version` prints the tool's version, and running it
with no command prints the help.

The command exits with status 1 when the gateway URL or the plugins file
cannot be read, when the distribution search fails, when no plugin could be
posted, or when some plugins or relations failed. Otherwise it exits with 0.

### Plugins file

A JSON array of plugin objects:

```json
[
  {
    "name": "example-plugin",
    "description": "Converts example data",
    "version": "main",
    "version_type": "branch",
    "repository": "https://git.example.com/example-plugin.git",
    "runtime": "python",
    "executable": "convert.py",
    "arguments": "",
    "enabled": true,
    "inputFormat": "application/json",
    "outputFormat": "covjson",
    "relations": [
      {"relationId": "operation/example-uid"}
    ]
  }
]
```

Missing fields default to empty strings, `false` or no relations. Each
`relationId` is an operation UID; relations whose UID is not found in the
environment are reported and counted as failures.

## Library use

```python
from eposplugins.models import load_plugins
from eposplugins.populate import populate
from eposplugins.post import PopulationError

with open("plugins.json", "rb") as fh:
    plugins = load_plugins(fh.read())

try:
    created = populate("http://localhost:8080/api/v1", plugins, "")
except PopulationError as exc:
    print(exc, [plugin.id for plugin in exc.posted])
```

`populate` returns the created plugins as `ConverterPlugin` objects from
`eposplugins.converter`. It raises `PopulationError` when the run finishes
with errors; the error's `posted` attribute lists any plugins that were
created before it. The steps are also available separately:
`find_distribution_ids`, `get_operation_id_for_distribution` and
`get_dist_operation_uids` in `eposplugins.populate`, and `post_plugins` in
`eposplugins.post`.

## What it does not do

The tool only creates plugins and relations. It does not look for, update or
remove plugins or relations that already exist in the converter, and it does
not retry failed requests (GET requests time out after 30 seconds, POST
requests after 60).

## Development

```
pip install -e ".[test]"
pytest
```