"""Go strategies: Gin services and Cobra CLIs."""

from __future__ import annotations

from upg.engine.strategy import GenerationContext, GenerationStrategy
from upg.models import EnrichmentFlags, TechStack
from upg.strategies.common import service_port

_GO_MOD_TEMPLATE = """\
module github.com/example/{project_name}

go 1.22

require (
{requires}
)
"""

_GIN_MAIN_TEMPLATE = """\
package main

import (
\t"net/http"
\t"os"

\t"github.com/gin-gonic/gin"
)

func setupRouter() *gin.Engine {{
\tr := gin.Default()
\tr.GET("/health", func(c *gin.Context) {{
\t\tc.JSON(http.StatusOK, gin.H{{"status": "ok"}})
\t}})
\treturn r
}}

func main() {{
\tport := os.Getenv("PORT")
\tif port == "" {{
\t\tport = "{port}"
\t}}
\tsetupRouter().Run(":" + port)
}}
"""

_GIN_TEST_TEMPLATE = """\
package main

import (
\t"net/http"
\t"net/http/httptest"
\t"testing"
)

func TestHealth(t *testing.T) {
\trouter := setupRouter()
\tw := httptest.NewRecorder()
\treq, _ := http.NewRequest("GET", "/health", nil)
\trouter.ServeHTTP(w, req)
\tif w.Code != http.StatusOK {
\t\tt.Fatalf("expected 200, got %d", w.Code)
\t}
}
"""

_COBRA_MAIN_TEMPLATE = """\
package main

import (
\t"fmt"
\t"os"
\t"strings"

\t"github.com/spf13/cobra"
)

func main() {{
\tvar shout bool
\troot := &cobra.Command{{Use: "{project_name}", Version: "0.1.0"}}
\tgreet := &cobra.Command{{
\t\tUse:  "greet [name]",
\t\tArgs: cobra.MaximumNArgs(1),
\t\tRun: func(cmd *cobra.Command, args []string) {{
\t\t\tname := "world"
\t\t\tif len(args) > 0 {{
\t\t\t\tname = args[0]
\t\t\t}}
\t\t\tmsg := fmt.Sprintf("Hello, %s!", name)
\t\t\tif shout {{
\t\t\t\tmsg = strings.ToUpper(msg)
\t\t\t}}
\t\t\tfmt.Println(msg)
\t\t}},
\t}}
\tgreet.Flags().BoolVar(&shout, "shout", false, "print in upper case")
\troot.AddCommand(greet)
\tif err := root.Execute(); err != nil {{
\t\tos.Exit(1)
\t}}
}}
"""


def _go_mod(project_name: str, requires: list[str]) -> str:
    return _GO_MOD_TEMPLATE.format(
        project_name=project_name,
        requires="\n".join(f"\t{req}" for req in requires),
    )


class GinStrategy(GenerationStrategy):
    id = "go-gin"
    name = "Go Gin Service"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "go" and stack.framework == "gin"

    async def apply(self, context: GenerationContext) -> None:
        requires = ["github.com/gin-gonic/gin v1.9.1"]
        if context.stack.orm == "gorm":
            requires.append("gorm.io/gorm v1.25.9")
        context.files["go.mod"] = _go_mod(context.project_name, requires)
        context.files["main.go"] = _GIN_MAIN_TEMPLATE.format(port=service_port(context.stack))
        context.files["main_test.go"] = _GIN_TEST_TEMPLATE


class CobraStrategy(GenerationStrategy):
    id = "go-cobra"
    name = "Go Cobra CLI"
    priority = 10

    def matches(self, stack: TechStack, flags: EnrichmentFlags | None = None) -> bool:
        return stack.language == "go" and stack.framework == "cobra"

    async def apply(self, context: GenerationContext) -> None:
        context.files["go.mod"] = _go_mod(context.project_name, ["github.com/spf13/cobra v1.8.0"])
        context.files["main.go"] = _COBRA_MAIN_TEMPLATE.format(project_name=context.project_name)


GO_STRATEGIES: tuple[GenerationStrategy, ...] = (
    GinStrategy(),
    CobraStrategy(),
)
