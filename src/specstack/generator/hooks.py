"""Client back-end: React Query hooks, type declarations and the hooks index."""

from specstack.config import GeneratorConfig
from specstack.generator.ts_builder import (
    CodeWriter,
    array_literal,
    doc_comment,
    member,
    object_literal,
    property_key,
    split_path,
    string_literal,
    template_literal,
)
from specstack.parser.base import Function, Spec
from specstack.typemap import (
    DEFAULT_POLICY,
    NamingPolicy,
    entity_names,
    hook_name,
    map_to_client_type,
    pascal_case,
    sanitize_identifier,
    table_identifier,
    type_from_name,
    unique_name,
)

NETWORK_ERROR_MESSAGE = "Network response was not ok"
QUERY_FILTER = ".filter(([, v]) => v !== undefined).map(([k, v]) => [k, String(v)])"


class HookGenerator:
    """Generates one typed query/mutation hook per function."""

    def __init__(self, config: GeneratorConfig | None = None, policy: NamingPolicy = DEFAULT_POLICY):
        self.config = config or GeneratorConfig()
        self.policy = policy

    def hook_name(self, func: Function) -> str:
        return hook_name(func.name)

    def render_hook(self, func: Function) -> str:
        """Render the hook module for a single function."""
        is_read = func.method == "GET"
        fields = self._param_fields(func)
        params_type = pascal_case(func.name) + "Params"

        if func.response_body_type:
            result_type = self._client_type(func.response_body_type)
        else:
            result_type = "null" if is_read else "void"

        w = CodeWriter()
        hook_fn = "useQuery" if is_read else "useMutation"
        w.line(f"import {{ {hook_fn} }} from {string_literal(self.config.query_package)};")
        imports = self._type_imports(func)
        if imports:
            w.line(f"import type {{ {', '.join(imports)} }} from {string_literal(self.config.types_import)};")
        w.line()

        if fields:
            w.open(f"export interface {params_type} {{")
            for key, ts_type, required in fields:
                w.line(f"{property_key(key)}{'' if required else '?'}: {ts_type};")
            w.close("}")
            w.line()

        if not fields:
            signature = ""
        elif all(not required for _, _, required in fields):
            signature = f"params: {params_type} = {{}}"
        else:
            signature = f"params: {params_type}"

        for line in doc_comment(func.summary):
            w.line(line)
        w.open(f"export function {self.hook_name(func)}({signature}) {{")
        if is_read:
            w.open(f"return useQuery<{result_type}>({{")
            w.line(f"queryKey: {array_literal(self.query_key(func))},")
            w.open("queryFn: async () => {")
        else:
            w.open(f"return useMutation<{result_type}>({{")
            w.open("mutationFn: async () => {")
        self._request(w, func, is_read)
        w.close("},")
        w.close("});")
        w.close("}")
        return w.render()

    def body_field(self, func: Function) -> str:
        """`body`, or `body_2` etc. when a path/query parameter already uses it."""
        taken = {p.name for p in (*func.path_parameters, *func.query_parameters)}
        return unique_name("body", taken)

    def query_key(self, func: Function) -> list[str]:
        """[functionName, ...path values, ...query values] in declaration order."""
        values = [member("params", p.name) for p in (*func.path_parameters, *func.query_parameters)]
        return [string_literal(func.name), *values]

    def render_types_module(self, spec: Spec) -> str:
        """One interface per table; nullable columns become optional fields."""
        blocks = []
        for table in spec.tables:
            w = CodeWriter()
            w.open(f"export interface {table_identifier(table.name)} {{")
            for col in table.columns:
                optional = "?" if col.nullable else ""
                w.line(f"{property_key(col.name)}{optional}: {map_to_client_type(col.type)};")
            w.close("}")
            blocks.append(w.render())
        if not blocks:
            return "export {};"
        return "\n\n".join(blocks)

    def render_index(self, hook_names: list[str]) -> str:
        """Re-export every generated hook module."""
        if not hook_names:
            return "export {};"
        return "\n".join(f"export * from {string_literal('./' + name)};" for name in hook_names)

    # -- helpers --------------------------------------------------------------

    def _client_type(self, type_name: str) -> str:
        return map_to_client_type(type_from_name(type_name, self.policy))

    def _param_fields(self, func: Function) -> list[tuple[str, str, bool]]:
        """(name, client type, required) for path params, query params and body."""
        fields = [(p.name, map_to_client_type(p.type), True) for p in func.path_parameters]
        fields += [(p.name, map_to_client_type(p.type), False) for p in func.query_parameters]
        if func.request_body_type:
            fields.append((self.body_field(func), self._client_type(func.request_body_type), True))
        return fields

    def _type_imports(self, func: Function) -> list[str]:
        nodes = [p.type for p in (*func.path_parameters, *func.query_parameters)]
        for type_name in (func.request_body_type, func.response_body_type):
            if type_name:
                nodes.append(type_from_name(type_name, self.policy))

        names: list[str] = []
        for node in nodes:
            for name in entity_names(node):
                name = sanitize_identifier(name, "")
                if name and name not in names:
                    names.append(name)
        return names

    def _url(self, func: Function, with_query: bool) -> str:
        declared = {p.name for p in func.path_parameters}
        parts: list[str | tuple[str]] = []
        for text, placeholder in split_path(func.path):
            parts.append(text)
            if placeholder is None:
                continue
            if placeholder in declared:
                parts.append((f"encodeURIComponent({member('params', placeholder)})",))
            else:
                parts.append("{" + placeholder + "}")
        if with_query:
            parts.append(("query ? '?' + query : ''",))
        return template_literal(parts)

    def _request(self, w: CodeWriter, func: Function, is_read: bool) -> None:
        query_params = func.query_parameters
        if query_params:
            entries = object_literal([(p.name, member("params", p.name)) for p in query_params])
            w.line(f"const queryParamsObj = Object.fromEntries(Object.entries({entries}){QUERY_FILTER});")
            w.line("const query = new URLSearchParams(queryParamsObj).toString();")

        url = self._url(func, with_query=bool(query_params))
        if is_read:
            w.line(f"const response = await fetch({url});")
        else:
            w.open(f"const response = await fetch({url}, {{")
            w.line(f"method: {string_literal(func.method)},")
            if func.request_body_type:
                w.line("headers: { 'Content-Type': 'application/json' },")
                w.line(f"body: JSON.stringify({member('params', self.body_field(func))}),")
            w.close("});")

        w.open("if (!response.ok) {")
        w.line(f"throw Object.assign(new Error({string_literal(NETWORK_ERROR_MESSAGE)}), {{ name: 'NetworkError' }});")
        w.close("}")

        if func.response_body_type:
            w.line(f"return (await response.json()) as {self._client_type(func.response_body_type)};")
        elif is_read:
            w.line("return null;")
        else:
            w.line("return undefined;")
