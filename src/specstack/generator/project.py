"""Project generator: lays out every artifact rendered from one Spec."""

from specstack.config import GeneratorConfig
from specstack.generator.hooks import HookGenerator
from specstack.generator.sql import SqlGenerator
from specstack.parser.base import Spec
from specstack.typemap import DEFAULT_POLICY, NamingPolicy, function_identifier, table_identifier


class ProjectGenerator:
    """Renders the SQL and client artifact families for a Spec."""

    def __init__(self, config: GeneratorConfig | None = None, policy: NamingPolicy = DEFAULT_POLICY):
        self.config = config or GeneratorConfig()
        self.sql = SqlGenerator(policy=policy)
        self.hooks = HookGenerator(config=self.config, policy=policy)

    def generate(self, spec: Spec) -> dict[str, str]:
        """Render all artifacts.

        Returns dict of {relative_path: content} with paths like
        'db/Pet_table.sql' and 'frontend/src/hooks/useGetPetById.ts'.
        """
        files: dict[str, str] = {}
        db_dir = self.config.db_dir
        hooks_dir = self.config.hooks_dir

        for table in spec.tables:
            files[f"{db_dir}/{table_identifier(table.name)}_table.sql"] = self.sql.render_table(table) + "\n"

        for func in spec.functions:
            files[f"{db_dir}/{function_identifier(func.name)}_function.sql"] = self.sql.render_function(func) + "\n"

        files[self.config.types_file] = self.hooks.render_types_module(spec) + "\n"

        hook_names = []
        for func in spec.functions:
            name = self.hooks.hook_name(func)
            hook_names.append(name)
            files[f"{hooks_dir}/{name}.ts"] = self.hooks.render_hook(func) + "\n"

        files[f"{hooks_dir}/index.ts"] = self.hooks.render_index(hook_names) + "\n"
        return files
