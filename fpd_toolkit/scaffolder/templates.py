"""Compiled-in templates and the renderer used by the scaffolder.

Every file the toolkit writes, whether while creating a project or while
auto-fixing one during validation, is produced from one of the named templates
in :data:`TEMPLATES`, expanded by :mod:`fpd_toolkit.scaffolder.expander`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fpd_toolkit.errors import TemplateError
from fpd_toolkit.scaffolder.expander import expand, variables


# ---------------------------------------------------------------------------
# Metadata (pubspec.yaml)
# ---------------------------------------------------------------------------

_PUBSPEC_APP = """\
name: {{project_name}}
description: {{description_yaml}}
publish_to: none
version: {{version}}+1

environment:
  sdk: {{sdk_constraint}}
  flutter: "{{flutter_constraint}}"

dependencies:
  flutter:
    sdk: flutter
  cupertino_icons: ^1.0.8
{{#dependencies}}
  {{name}}: {{version}}
{{/dependencies}}

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^5.0.0
{{#dev_dependencies}}
  {{name}}: {{version}}
{{/dev_dependencies}}

flutter:
  uses-material-design: true
{{#has_assets}}
  assets:
{{#assets}}
    - {{path}}
{{/assets}}
{{/has_assets}}
"""

_PUBSPEC_PLUGIN = """\
name: {{project_name}}
description: {{description_yaml}}
version: {{version}}
homepage: {{homepage}}
repository: {{repository}}
issue_tracker: {{issue_tracker}}
documentation: {{documentation}}

environment:
  sdk: {{sdk_constraint}}
  flutter: "{{flutter_constraint}}"

dependencies:
  flutter:
    sdk: flutter
  plugin_platform_interface: ^2.1.8
{{#has_web}}
  flutter_web_plugins:
    sdk: flutter
  web: ^1.1.0
{{/has_web}}
{{#dependencies}}
  {{name}}: {{version}}
{{/dependencies}}

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^5.0.0
{{#dev_dependencies}}
  {{name}}: {{version}}
{{/dev_dependencies}}

flutter:
  plugin:
    platforms:
{{#platforms}}
      {{platform}}:
{{#android}}
        package: {{package}}
{{/android}}
        pluginClass: {{plugin_class}}
{{#web}}
        fileName: {{file_name}}
{{/web}}
{{/platforms}}
"""

_PUBSPEC_PACKAGE = """\
name: {{project_name}}
description: {{description_yaml}}
version: {{version}}
homepage: {{homepage}}
repository: {{repository}}
issue_tracker: {{issue_tracker}}
documentation: {{documentation}}

environment:
  sdk: {{sdk_constraint}}

dependencies:
  meta: ^1.15.0
{{#dependencies}}
  {{name}}: {{version}}
{{/dependencies}}

dev_dependencies:
  lints: ^5.0.0
  test: ^1.25.0
{{#dev_dependencies}}
  {{name}}: {{version}}
{{/dev_dependencies}}
"""

_EXAMPLE_PUBSPEC = """\
name: {{project_name}}_example
description: "Demonstrates how to use the {{project_name}} plugin."
publish_to: none
version: 1.0.0+1

environment:
  sdk: {{sdk_constraint}}

dependencies:
  flutter:
    sdk: flutter
  {{project_name}}:
    path: ../

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^5.0.0

flutter:
  uses-material-design: true
"""


# ---------------------------------------------------------------------------
# Documentation and repository files
# ---------------------------------------------------------------------------

_README = """\
# {{project_name}}

{{description}}

## Features

{{#features}}
- {{feature}}
{{/features}}

## Getting started

{{#is_app}}
1. Clone the repository
2. Run `flutter pub get`
3. Run `flutter run`
{{/is_app}}
{{#is_library}}
Add this to your package's `pubspec.yaml` file:

```yaml
dependencies:
  {{project_name}}: ^{{version}}
```

Then run:

```bash
{{pub_command}} pub get
```
{{/is_library}}

## Usage

```dart
{{usage_example}}
```

## Additional information

This {{kind_label}} was generated with FPD Toolkit. Run
`fpd-toolkit validate .` to check it against the package quality rubric.

## License

This project is licensed under the MIT License - see the [LICENSE](LICENSE) file for details.
"""

_CHANGELOG = """\
# Changelog

All notable changes to this project will be documented in this file.

The format is based on [Keep a Changelog](https://keepachangelog.com/en/1.0.0/),
and this project adheres to [Semantic Versioning](https://semver.org/spec/v2.0.0.html).

## [Unreleased]

## [{{version}}] - {{date}}

### Added
- Initial version of {{project_name}}
{{#features}}
- {{feature}}
{{/features}}
"""

_LICENSE_MIT = """\
MIT License

Copyright (c) {{year}} {{author}}

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

_ANALYSIS_OPTIONS = """\
include: package:{{lints_include}}

analyzer:
  exclude:
    - "**/*.g.dart"
    - "**/*.freezed.dart"
    - "**/*.gr.dart"
    - build/**
  errors:
    invalid_annotation_target: ignore
    missing_required_param: error
    missing_return: error

linter:
  rules:
    prefer_single_quotes: true
    prefer_const_constructors: true
    prefer_const_declarations: true
    prefer_final_fields: true
    prefer_final_locals: true
    avoid_relative_lib_imports: true
    camel_case_types: true
    avoid_unnecessary_containers: true
    unnecessary_new: true
{{#is_flutter}}
    use_key_in_widget_constructors: true
    sized_box_for_whitespace: true
    sort_child_properties_last: true
{{/is_flutter}}
"""

_GITIGNORE = """\
# Miscellaneous
*.class
*.log
*.pyc
*.swp
.DS_Store
.atom/
.buildlog/
.history
.svn/
migrate_working_dir/

# IntelliJ related
*.iml
*.ipr
*.iws
.idea/

# VS Code related
.vscode/

# Flutter/Dart/Pub related
**/doc/api/
**/ios/Flutter/.last_build_id
.dart_tool/
.flutter-plugins
.flutter-plugins-dependencies
.packages
.pub-cache/
.pub/
/build/
{{#is_library}}
pubspec.lock
{{/is_library}}

# Symbolication and obfuscation
app.*.symbols
app.*.map.json

# Android Studio build artifacts
/android/app/debug
/android/app/profile
/android/app/release

# Coverage
coverage/

# Environment
.env
.env.local
.env.*.local
"""

# GitHub Actions expressions (``${{ ... }}``) are never treated as markers.
_CI_WORKFLOW = """\
name: CI

on:
  push:
    branches: [ main, develop ]
  pull_request:
    branches: [ main ]

jobs:
  test:
    runs-on: ${{ matrix.os }}
    strategy:
      matrix:
        os: [ubuntu-latest]

    steps:
      - uses: actions/checkout@v4
{{#is_flutter}}
      - uses: subosito/flutter-action@v2
        with:
          flutter-version: '3.24.0'
          cache: true
{{/is_flutter}}
{{#is_dart}}
      - uses: dart-lang/setup-dart@v1
        with:
          sdk: '3.7.0'
{{/is_dart}}
      - name: Install dependencies
        run: {{pub_command}} pub get
      - name: Verify formatting
        run: dart format --output=none --set-exit-if-changed .
      - name: Analyze project source
        run: {{pub_command}} analyze
      - name: Run tests
        run: {{pub_command}} test
      - name: Summary
        run: echo "Checked ${{ github.ref }} on ${{ matrix.os }}"
"""


# ---------------------------------------------------------------------------
# Dart sources
# ---------------------------------------------------------------------------

_LIBRARY = """\
/// {{description}}
library {{project_name}};

{{#exports}}
export '{{export}}';
{{/exports}}
"""

_BASE_CLASS = """\
/// Base class for {{project_name}}.
class {{pascal_name}} {
  /// Creates a new instance of [{{pascal_name}}].
  const {{pascal_name}}();

  /// Example method that returns a greeting.
  String hello() {
    return 'Hello from {{project_name}}!';
  }
}
"""

_APP_MAIN = """\
import 'package:flutter/material.dart';

import 'package:{{project_name}}/{{project_name}}.dart';

void main() {
  runApp(const {{pascal_name}}App());
}
"""

_APP_LIBRARY = """\
/// {{description}}
library {{project_name}};

import 'package:flutter/material.dart';

/// Root widget of {{project_name}}.
class {{pascal_name}}App extends StatelessWidget {
  /// Creates the root widget.
  const {{pascal_name}}App({super.key});

  @override
  Widget build(BuildContext context) {
    return MaterialApp(
      title: '{{pascal_name}}',
      theme: ThemeData(
        colorScheme: ColorScheme.fromSeed(seedColor: Colors.deepPurple),
        useMaterial3: true,
      ),
      home: const HomePage(title: '{{pascal_name}} Home Page'),
    );
  }
}

/// Home page with a simple counter.
class HomePage extends StatefulWidget {
  /// Creates the home page.
  const HomePage({super.key, required this.title});

  /// Title shown in the app bar.
  final String title;

  @override
  State<HomePage> createState() => _HomePageState();
}

class _HomePageState extends State<HomePage> {
  int _counter = 0;

  void _incrementCounter() {
    setState(() {
      _counter++;
    });
  }

  @override
  Widget build(BuildContext context) {
    return Scaffold(
      appBar: AppBar(
        backgroundColor: Theme.of(context).colorScheme.inversePrimary,
        title: Text(widget.title),
      ),
      body: Center(
        child: Column(
          mainAxisAlignment: MainAxisAlignment.center,
          children: <Widget>[
            const Text('You have pushed the button this many times:'),
            Text(
              '$_counter',
              style: Theme.of(context).textTheme.headlineMedium,
            ),
          ],
        ),
      ),
      floatingActionButton: FloatingActionButton(
        onPressed: _incrementCounter,
        tooltip: 'Increment',
        child: const Icon(Icons.add),
      ),
    );
  }
}
"""

_PLUGIN_LIBRARY = """\
/// {{description}}
library {{project_name}};

import 'src/{{project_name}}_platform_interface.dart';

export 'src/{{project_name}}_method_channel.dart';
export 'src/{{project_name}}_platform_interface.dart';

/// Entry point of the {{project_name}} plugin.
class {{pascal_name}} {
  /// Returns the version of the host platform.
  Future<String?> getPlatformVersion() {
    return {{pascal_name}}Platform.instance.getPlatformVersion();
  }
}
"""

_PLATFORM_INTERFACE = """\
import 'package:plugin_platform_interface/plugin_platform_interface.dart';

import '{{project_name}}_method_channel.dart';

/// The interface that implementations of {{project_name}} must implement.
abstract class {{pascal_name}}Platform extends PlatformInterface {
  /// Constructs a {{pascal_name}}Platform.
  {{pascal_name}}Platform() : super(token: _token);

  static final Object _token = Object();

  static {{pascal_name}}Platform _instance = MethodChannel{{pascal_name}}();

  /// The default instance of [{{pascal_name}}Platform] to use.
  static {{pascal_name}}Platform get instance => _instance;

  /// Platform-specific implementations set this with their own class that
  /// extends [{{pascal_name}}Platform] when they register themselves.
  static set instance({{pascal_name}}Platform instance) {
    PlatformInterface.verifyToken(instance, _token);
    _instance = instance;
  }

  /// Returns the version of the host platform.
  Future<String?> getPlatformVersion() {
    throw UnimplementedError('getPlatformVersion() has not been implemented.');
  }
}
"""

_METHOD_CHANNEL = """\
import 'package:flutter/foundation.dart';
import 'package:flutter/services.dart';

import '{{project_name}}_platform_interface.dart';

/// An implementation of [{{pascal_name}}Platform] that uses method channels.
class MethodChannel{{pascal_name}} extends {{pascal_name}}Platform {
  /// The method channel used to interact with the native platform.
  @visibleForTesting
  final methodChannel = const MethodChannel('{{project_name}}');

  @override
  Future<String?> getPlatformVersion() async {
    final version = await methodChannel.invokeMethod<String>('getPlatformVersion');
    return version;
  }
}
"""

_TEST = """\
{{#is_flutter}}
import 'package:flutter_test/flutter_test.dart';
{{/is_flutter}}
{{#is_dart}}
import 'package:test/test.dart';
{{/is_dart}}
import 'package:{{project_name}}/{{project_name}}.dart';

void main() {
  group('{{pascal_name}}', () {
{{#is_app}}
    testWidgets('starts the counter at zero', (tester) async {
      await tester.pumpWidget(const {{pascal_name}}App());
      expect(find.text('0'), findsOneWidget);
    });
{{/is_app}}
{{#is_plugin}}
    test('uses the method channel implementation by default', () {
      expect({{pascal_name}}Platform.instance, isA<MethodChannel{{pascal_name}}>());
    });
{{/is_plugin}}
{{#is_dart}}
    test('hello returns a greeting', () {
      expect(const {{pascal_name}}().hello(), contains('{{project_name}}'));
    });
{{/is_dart}}
  });
}
"""

_TEST_PLACEHOLDER = """\
{{#is_flutter}}
import 'package:flutter_test/flutter_test.dart';
{{/is_flutter}}
{{#is_dart}}
import 'package:test/test.dart';
{{/is_dart}}
import 'package:{{project_name}}/{{project_name}}.dart';

void main() {
  group('{{project_name}}', () {
    test('placeholder', () {
      expect(true, isTrue);
    });
  });
}
"""

_EXAMPLE_PLUGIN_MAIN = """\
import 'package:flutter/material.dart';
import 'package:{{project_name}}/{{project_name}}.dart';

void main() {
  runApp(const ExampleApp());
}

/// Example application for the {{project_name}} plugin.
class ExampleApp extends StatefulWidget {
  const ExampleApp({super.key});

  @override
  State<ExampleApp> createState() => _ExampleAppState();
}

class _ExampleAppState extends State<ExampleApp> {
  final _plugin = {{pascal_name}}();
  String _platformVersion = 'Unknown';

  @override
  void initState() {
    super.initState();
    _loadPlatformVersion();
  }

  Future<void> _loadPlatformVersion() async {
    final version = await _plugin.getPlatformVersion() ?? 'Unknown platform version';
    if (!mounted) return;
    setState(() {
      _platformVersion = version;
    });
  }

  @override
  Widget build(BuildContext context) {
    return MaterialApp(
      home: Scaffold(
        appBar: AppBar(title: const Text('{{project_name}} example')),
        body: Center(child: Text('Running on: $_platformVersion')),
      ),
    );
  }
}
"""

_EXAMPLE_PLUGIN_README = """\
# {{project_name}}_example

Demonstrates how to use the {{project_name}} plugin.

## Getting started

Run `flutter run` from this directory.
"""

_EXAMPLE_PACKAGE = """\
import 'package:{{project_name}}/{{project_name}}.dart';

void main() {
  const {{camel_name}} = {{pascal_name}}();
  print({{camel_name}}.hello());
}
"""


# ---------------------------------------------------------------------------
# Native platform stubs -- applications
# ---------------------------------------------------------------------------

_APP_ANDROID = """\
package {{android_package}}

import io.flutter.embedding.android.FlutterActivity

class MainActivity : FlutterActivity()
"""

_APP_IOS = """\
import Flutter
import UIKit

@main
@objc class AppDelegate: FlutterAppDelegate {
  override func application(
    _ application: UIApplication,
    didFinishLaunchingWithOptions launchOptions: [UIApplication.LaunchOptionsKey: Any]?
  ) -> Bool {
    GeneratedPluginRegistrant.register(with: self)
    return super.application(application, didFinishLaunchingWithOptions: launchOptions)
  }
}
"""

_APP_MACOS = """\
import Cocoa
import FlutterMacOS

@main
class AppDelegate: FlutterAppDelegate {
  override func applicationShouldTerminateAfterLastWindowClosed(_ sender: NSApplication) -> Bool {
    return true
  }
}
"""

_APP_WEB = """\
<!DOCTYPE html>
<html>
<head>
  <base href="$FLUTTER_BASE_HREF">
  <meta charset="UTF-8">
  <meta name="description" content="{{description}}">
  <title>{{project_name}}</title>
  <link rel="manifest" href="manifest.json">
</head>
<body>
  <script src="flutter_bootstrap.js" async></script>
</body>
</html>
"""

_APP_WINDOWS = """\
#include <flutter/dart_project.h>
#include <flutter/flutter_view_controller.h>
#include <windows.h>

#include "flutter_window.h"

int APIENTRY wWinMain(_In_ HINSTANCE instance, _In_opt_ HINSTANCE prev,
                      _In_ wchar_t *command_line, _In_ int show_command) {
  flutter::DartProject project(L"data");
  FlutterWindow window(project);
  if (!window.Create(L"{{project_name}}", Win32Window::Point(10, 10),
                     Win32Window::Size(1280, 720))) {
    return EXIT_FAILURE;
  }
  return EXIT_SUCCESS;
}
"""

_APP_LINUX = """\
#include "my_application.h"

int main(int argc, char** argv) {
  g_autoptr(MyApplication) app = my_application_new();
  return g_application_run(G_APPLICATION(app), argc, argv);
}
"""


# ---------------------------------------------------------------------------
# Native platform stubs -- plugins
# ---------------------------------------------------------------------------

_PLUGIN_ANDROID = """\
package {{android_package}};

import androidx.annotation.NonNull;

import io.flutter.embedding.engine.plugins.FlutterPlugin;
import io.flutter.plugin.common.MethodCall;
import io.flutter.plugin.common.MethodChannel;
import io.flutter.plugin.common.MethodChannel.MethodCallHandler;
import io.flutter.plugin.common.MethodChannel.Result;

/** {{pascal_name}}Plugin */
public class {{pascal_name}}Plugin implements FlutterPlugin, MethodCallHandler {
  private MethodChannel channel;

  @Override
  public void onAttachedToEngine(@NonNull FlutterPluginBinding binding) {
    channel = new MethodChannel(binding.getBinaryMessenger(), "{{project_name}}");
    channel.setMethodCallHandler(this);
  }

  @Override
  public void onMethodCall(@NonNull MethodCall call, @NonNull Result result) {
    if (call.method.equals("getPlatformVersion")) {
      result.success("Android " + android.os.Build.VERSION.RELEASE);
    } else {
      result.notImplemented();
    }
  }

  @Override
  public void onDetachedFromEngine(@NonNull FlutterPluginBinding binding) {
    channel.setMethodCallHandler(null);
  }
}
"""

_PLUGIN_IOS = """\
import Flutter
import UIKit

public class Swift{{pascal_name}}Plugin: NSObject, FlutterPlugin {
  public static func register(with registrar: FlutterPluginRegistrar) {
    let channel = FlutterMethodChannel(name: "{{project_name}}", binaryMessenger: registrar.messenger())
    let instance = Swift{{pascal_name}}Plugin()
    registrar.addMethodCallDelegate(instance, channel: channel)
  }

  public func handle(_ call: FlutterMethodCall, result: @escaping FlutterResult) {
    switch call.method {
    case "getPlatformVersion":
      result("iOS " + UIDevice.current.systemVersion)
    default:
      result(FlutterMethodNotImplemented)
    }
  }
}
"""

_PLUGIN_MACOS = """\
import Cocoa
import FlutterMacOS

public class {{pascal_name}}Plugin: NSObject, FlutterPlugin {
  public static func register(with registrar: FlutterPluginRegistrar) {
    let channel = FlutterMethodChannel(name: "{{project_name}}", binaryMessenger: registrar.messenger)
    let instance = {{pascal_name}}Plugin()
    registrar.addMethodCallDelegate(instance, channel: channel)
  }

  public func handle(_ call: FlutterMethodCall, result: @escaping FlutterResult) {
    switch call.method {
    case "getPlatformVersion":
      result("macOS " + ProcessInfo.processInfo.operatingSystemVersionString)
    default:
      result(FlutterMethodNotImplemented)
    }
  }
}
"""

_PLUGIN_WEB = """\
import 'package:flutter_web_plugins/flutter_web_plugins.dart';
import 'package:web/web.dart' as web;

import 'src/{{project_name}}_platform_interface.dart';

/// A web implementation of [{{pascal_name}}Platform].
class {{pascal_name}}Web extends {{pascal_name}}Platform {
  /// Constructs a {{pascal_name}}Web.
  {{pascal_name}}Web();

  /// Registers this class as the default instance of [{{pascal_name}}Platform].
  static void registerWith(Registrar registrar) {
    {{pascal_name}}Platform.instance = {{pascal_name}}Web();
  }

  @override
  Future<String?> getPlatformVersion() async {
    return web.window.navigator.userAgent;
  }
}
"""

_PLUGIN_WINDOWS = """\
#include <flutter/method_channel.h>
#include <flutter/plugin_registrar_windows.h>
#include <flutter/standard_method_codec.h>

#include <memory>

namespace {{project_name}} {

class {{pascal_name}}Plugin : public flutter::Plugin {
 public:
  static void RegisterWithRegistrar(flutter::PluginRegistrarWindows *registrar) {
    auto channel =
        std::make_unique<flutter::MethodChannel<flutter::EncodableValue>>(
            registrar->messenger(), "{{project_name}}",
            &flutter::StandardMethodCodec::GetInstance());
    auto plugin = std::make_unique<{{pascal_name}}Plugin>();
    channel->SetMethodCallHandler(
        [](const auto &call, auto result) {
          if (call.method_name() == "getPlatformVersion") {
            result->Success(flutter::EncodableValue("Windows"));
          } else {
            result->NotImplemented();
          }
        });
    registrar->AddPlugin(std::move(plugin));
  }
};

}  // namespace {{project_name}}
"""

_PLUGIN_LINUX = """\
#include <flutter_linux/flutter_linux.h>
#include <sys/utsname.h>

#define {{upper_name}}_PLUGIN(obj) (G_TYPE_CHECK_INSTANCE_CAST((obj), {{project_name}}_plugin_get_type(), GObject))

static void method_call_cb(FlMethodChannel* channel, FlMethodCall* method_call,
                           gpointer user_data) {
  g_autoptr(FlMethodResponse) response = nullptr;
  if (strcmp(fl_method_call_get_name(method_call), "getPlatformVersion") == 0) {
    struct utsname uname_data = {};
    uname(&uname_data);
    g_autofree gchar* version = g_strdup_printf("Linux %s", uname_data.version);
    response = FL_METHOD_RESPONSE(fl_method_success_response_new(fl_value_new_string(version)));
  } else {
    response = FL_METHOD_RESPONSE(fl_method_not_implemented_response_new());
  }
  fl_method_call_respond(method_call, response, nullptr);
}

void {{project_name}}_plugin_register_with_registrar(FlPluginRegistrar* registrar) {
  g_autoptr(FlStandardMethodCodec) codec = fl_standard_method_codec_new();
  g_autoptr(FlMethodChannel) channel =
      fl_method_channel_new(fl_plugin_registrar_get_messenger(registrar),
                            "{{project_name}}", FL_METHOD_CODEC(codec));
  fl_method_channel_set_method_call_handler(channel, method_call_cb, nullptr, nullptr);
}
"""


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

TEMPLATES: Mapping[str, str] = MappingProxyType({
    "pubspec/app": _PUBSPEC_APP,
    "pubspec/plugin": _PUBSPEC_PLUGIN,
    "pubspec/package": _PUBSPEC_PACKAGE,
    "pubspec/example": _EXAMPLE_PUBSPEC,
    "docs/readme": _README,
    "docs/changelog": _CHANGELOG,
    "docs/license_mit": _LICENSE_MIT,
    "config/analysis_options": _ANALYSIS_OPTIONS,
    "config/gitignore": _GITIGNORE,
    "config/ci_workflow": _CI_WORKFLOW,
    "dart/library": _LIBRARY,
    "dart/base_class": _BASE_CLASS,
    "dart/app_main": _APP_MAIN,
    "dart/app_library": _APP_LIBRARY,
    "dart/plugin_library": _PLUGIN_LIBRARY,
    "dart/platform_interface": _PLATFORM_INTERFACE,
    "dart/method_channel": _METHOD_CHANNEL,
    "dart/test": _TEST,
    "dart/test_placeholder": _TEST_PLACEHOLDER,
    "example/plugin_main": _EXAMPLE_PLUGIN_MAIN,
    "example/plugin_readme": _EXAMPLE_PLUGIN_README,
    "example/package_main": _EXAMPLE_PACKAGE,
    "native/app/android": _APP_ANDROID,
    "native/app/ios": _APP_IOS,
    "native/app/macos": _APP_MACOS,
    "native/app/web": _APP_WEB,
    "native/app/windows": _APP_WINDOWS,
    "native/app/linux": _APP_LINUX,
    "native/plugin/android": _PLUGIN_ANDROID,
    "native/plugin/ios": _PLUGIN_IOS,
    "native/plugin/macos": _PLUGIN_MACOS,
    "native/plugin/web": _PLUGIN_WEB,
    "native/plugin/windows": _PLUGIN_WINDOWS,
    "native/plugin/linux": _PLUGIN_LINUX,
})


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the compiled-in templates with a binding context.

    The renderer is stateless apart from its *strict* flag, so one instance
    can be shared between the generator and the validator's auto-fix step.
    """

    def __init__(
        self,
        templates: Mapping[str, str] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self.templates = TEMPLATES if templates is None else templates
        self.strict = strict

    def render(self, template_name: str, context: Mapping[str, Any]) -> str:
        """Render a named template with the provided context.

        Raises:
            TemplateError: If no template has that name, or, in strict mode,
                if the template cannot be fully resolved.
        """
        try:
            template = self.templates[template_name]
        except KeyError:
            raise TemplateError(f"Unknown template: {template_name}") from None
        try:
            return expand(template, context, strict=self.strict)
        except TemplateError as exc:
            raise TemplateError(f"{template_name}: {exc}") from exc

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string, such as a plan path."""
        return expand(template_string, context, strict=self.strict)

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return the sorted template names starting with *prefix*."""
        return sorted(name for name in self.templates if name.startswith(prefix))

    def variables(self, template_name: str) -> list[str]:
        """Names referenced by a template, sorted.

        Raises:
            TemplateError: If no template has that name.
        """
        try:
            return variables(self.templates[template_name])
        except KeyError:
            raise TemplateError(f"Unknown template: {template_name}") from None


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def to_pascal_case(value: str) -> str:
    """Convert ``some_thing`` or ``some-thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_camel_case(value: str) -> str:
    """Convert ``some_thing`` to ``someThing``."""
    pascal = to_pascal_case(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""

