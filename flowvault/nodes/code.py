from typing import Any, Dict

from flowvault.constants import FUNCTION_NODE_TYPE, NodeKind
from flowvault.nodes.base import BaseNode, NodeInput, NodeOutput, NodeSchema
from flowvault.nodes.registry import NodeRegistry
from flowvault.vault.errors import ScriptFailed

DEFAULT_CODE = "return msg"


@NodeRegistry.register
class FunctionNode(BaseNode):
    type_name = FUNCTION_NODE_TYPE

    @property
    def schema(self) -> NodeSchema:
        return NodeSchema(
            name=FUNCTION_NODE_TYPE,
            label="Python Function",
            kind=NodeKind.FUNCTION,
            description="Runs inline Python against the message.",
            inputs=[
                NodeInput(
                    name="code",
                    type="code",
                    label="Python Code",
                    default="""# Available variables:
# - msg: the incoming message
# - flow: flow-scoped context store
# - global_context: global context store
# - node: this node (node.error / node.warn)
#
# Vault values by name:
#   vault = global_context.get("vault")
#   msg["host"] = vault("Prod").get_group("db").host

return msg""",
                )
            ],
            outputs=[
                NodeOutput(name="msg", type="json", label="Message"),
            ],
            category="Utilities",
        )

    async def execute(self, context: Dict[str, Any], input_data: Any) -> Any:
        code = self.config.get("code")
        if not code or not code.strip():
            code = DEFAULT_CODE

        exec_globals = {
            "msg": input_data,
            "flow": context["flow"],
            "global_context": context["global"],
            "node": self,
        }
        exec_locals: Dict[str, Any] = {}

        # Wrap the user code in 'main' so it can use return and await
        wrapped_code = "async def main():\n"
        for line in code.split("\n"):
            line = line.replace("\t", "    ")
            wrapped_code += f"    {line}\n"

        try:
            exec(wrapped_code, exec_globals, exec_locals)
            main_func = exec_locals["main"]
            return await main_func()
        except SyntaxError as e:
            cause = SyntaxError(f"syntax error: {e.msg} at line {(e.lineno or 1) - 1}")
            raise ScriptFailed(self.id, cause) from e
        except Exception as e:
            raise ScriptFailed(self.id, e) from e
