"""Google Apps Script that backs the roster and sync endpoints.

Paste it into the spreadsheet's Apps Script editor and deploy it as a web
app; the deployment URL is the sheet URL configured in settings. Tabs whose
name contains ``RECORD_SHEET_MARKER`` hold synced records and are excluded
from the roster.
"""

RECORD_SHEET_MARKER = "_기록"

APPS_SCRIPT = """
function doGet(e) {
  const ss = SpreadsheetApp.getActiveSpreadsheet();
  const sheets = ss.getSheets();
  const data = sheets.map(sheet => {
    const name = sheet.getName();
    if (name.includes("_기록")) return null;
    const values = sheet.getDataRange().getValues();
    const students = values.slice(1).map(row => ({
      id: name + "_" + row[0],
      number: row[0],
      name: row[1]
    })).filter(s => s.name);
    return { id: name, name: name, students: students };
  }).filter(d => d !== null);
  return ContentService.createTextOutput(JSON.stringify(data)).setMimeType(ContentService.MimeType.JSON);
}

function doPost(e) {
  const data = JSON.parse(e.postData.contents);
  const ss = SpreadsheetApp.getActiveSpreadsheet();
  const sheetName = data.className + "_기록";
  let sheet = ss.getSheetByName(sheetName);

  if (!sheet) {
    sheet = ss.insertSheet(sheetName);
    sheet.appendRow(["날짜", "번호", "이름", "내용"]);
    sheet.getRange("A1:D1").setBackground("#4f46e5").setFontColor("white").setFontWeight("bold");
    sheet.setFrozenRows(1);
  }

  const now = new Date();
  const dateStr = Utilities.formatDate(now, "GMT+9", "yyyy-MM-dd HH:mm");
  sheet.appendRow([dateStr, data.studentNumber, data.studentName, data.content]);
  return ContentService.createTextOutput("Success").setMimeType(ContentService.MimeType.TEXT);
}
""".strip()

SETUP_STEPS = [
	"구글 시트 상단 [확장 프로그램] > [Apps Script]를 엽니다.",
	"스크립트를 붙여넣고 저장하세요.",
	"[배포] > [새 배포] > 유형: [웹 앱] > 액세스: [모든 사람] 설정 후 배포합니다.",
	"생성된 [웹 앱 URL]을 설정에 입력해 주세요.",
]
